import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from ...application.ports.ai_provider import AIProvider
from ...application.ports.doctor_matcher import DoctorMatcher
from ...application.ports.doctors_repo import DoctorDto
from ...exceptions import NotFound, RecommendationFailed

logger = logging.getLogger(__name__)

MATCH_PROMPT = """
Act as a medical receptionist.
Match the best doctor from this list: {candidates}
Patient Symptom: "{description}"
Return ONLY JSON: {{ "doctorId": <id> }}
"""


@dataclass
class IndexedDoctor:
    doctor: DoctorDto
    text: str

    def as_candidate(self) -> dict:
        return {
            "doctor_id": self.doctor.id,
            "name": self.doctor.full_name,
            "specialty": self.doctor.specialty,
            "sector": self.doctor.sector,
            "keywords": self.doctor.keywords,
        }


def profile_text(doctor: DoctorDto) -> str:
    return f"{doctor.full_name} is a {doctor.specialty}. Specialized in: {doctor.keywords or ''}."


def parse_doctor_id(text: str) -> int:
    cleaned = text.replace("```json", "").replace("```", "").strip()
    try:
        return int(json.loads(cleaned)["doctorId"])
    except (ValueError, KeyError, TypeError) as e:
        raise RecommendationFailed(f"Unreadable model answer: {cleaned[:100]}") from e


class DoctorIndex(DoctorMatcher):
    """Embedding index over doctor profiles, owned by the application.

    Built on first use and rebuilt once older than ``refresh_seconds`` or on
    an explicit ``refresh()``. Holds profile data only, never ledger state.
    """

    def __init__(
        self,
        ai: AIProvider,
        load_doctors: Callable[[], List[DoctorDto]],
        refresh_seconds: int = 3600,
        top_k: int = 3,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ai = ai
        self.load_doctors = load_doctors
        self.refresh_seconds = refresh_seconds
        self.top_k = top_k
        self._monotonic = monotonic
        self._lock = threading.Lock()
        self._entries: List[IndexedDoctor] = []
        self._matrix: Optional[np.ndarray] = None
        self._built_at: Optional[float] = None

    @property
    def size(self) -> int:
        return len(self._entries)

    def refresh(self) -> int:
        doctors = self.load_doctors()
        entries = [IndexedDoctor(doctor=d, text=profile_text(d)) for d in doctors]
        vectors = [self.ai.embed(e.text) for e in entries]
        matrix = _normalize(np.array(vectors, dtype=float)) if vectors else None
        with self._lock:
            self._entries = entries
            self._matrix = matrix
            self._built_at = self._monotonic()
        logger.info(f"Doctor index rebuilt with {len(entries)} doctors")
        return len(entries)

    def is_stale(self) -> bool:
        if self._built_at is None:
            return True
        return self._monotonic() - self._built_at >= self.refresh_seconds

    def search(self, description: str) -> List[IndexedDoctor]:
        if self.is_stale():
            self.refresh()
        with self._lock:
            entries, matrix = self._entries, self._matrix
        if not entries:
            return []
        query = _normalize(np.array([self.ai.embed(description)], dtype=float))[0]
        scores = matrix @ query
        order = np.argsort(-scores, kind="stable")[: self.top_k]
        return [entries[i] for i in order]

    def match(self, description: str) -> int:
        candidates = self.search(description)
        if not candidates:
            raise NotFound("No doctors available for matching")

        prompt = MATCH_PROMPT.format(
            candidates=json.dumps([c.as_candidate() for c in candidates]),
            description=description,
        )
        doctor_id = parse_doctor_id(self.ai.generate_text(prompt))

        with self._lock:
            known = {e.doctor.id for e in self._entries}
        if doctor_id not in known:
            logger.warning(f"Model picked unknown doctor id {doctor_id}")
            raise NotFound("Doctor not found")
        return doctor_id


def _normalize(matrix: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return matrix / norms
