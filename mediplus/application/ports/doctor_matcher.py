from typing import Protocol


class DoctorMatcher(Protocol):
    def match(self, description: str) -> int:
        """Return the id of the doctor best suited to a symptom description."""
        ...
