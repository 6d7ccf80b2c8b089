import copy
import json
import threading

INDUSTRIES = ["tech-software", "finance-banking", "healthcare-biotech"]

BASE_INSIGHT = {
    "salaryRanges": [
        {"role": "Software Engineer", "min": 80000, "max": 160000, "median": 115000, "location": "US"},
        {"role": "Data Scientist", "min": 90000, "max": 170000, "median": 125000.5, "location": "US"},
    ],
    "growthRate": 12.5,
    "demandLevel": "High",
    "topSkills": ["Python", "Cloud", "SQL"],
    "marketOutlook": "Positive",
    "keyTrends": ["AI adoption", "Remote work"],
    "recommendedSkills": ["Kubernetes", "MLOps"],
}


def insight_payload(**overrides):
    data = copy.deepcopy(BASE_INSIGHT)
    data.update(overrides)
    return data


def quiz_payload(n=10):
    return {"questions": [
        {"question": f"Question {i}?", "options": [f"A{i}", f"B{i}", f"C{i}", f"D{i}"],
         "correctAnswer": f"A{i}", "explanation": f"A{i} is right."}
        for i in range(n)
    ]}


def fenced(obj, tag="json"):
    return f"```{tag}\n{json.dumps(obj, indent=2)}\n```"


class FakeClient:
    """Stands in for GenerativeClient; ``responder(prompt)`` returns text or an exception to raise."""

    def __init__(self, responder):
        self.responder = responder
        self.prompts = []
        self._lock = threading.Lock()

    def invoke(self, prompt, timeout=None):
        with self._lock:
            self.prompts.append(prompt)
        result = self.responder(prompt)
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        pass
