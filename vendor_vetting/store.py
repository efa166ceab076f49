"""In-memory data store for Vendor Vetting.

Provides the repository used during development and testing. The
database-backed ``SqlStore`` in ``vendor_vetting.db`` offers the same
methods, so the workflow can run against either.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

from vendor_vetting.errors import ConcurrentModificationError, InvalidInputError
from vendor_vetting.schemas.assessment import Assessment, AssessmentStatus, Verdict
from vendor_vetting.schemas.vendor import Vendor


class AssessmentRepository(Protocol):
    """Storage operations the workflow depends on."""

    def lock(self, record_id: str) -> AbstractContextManager[None]: ...

    def get_assessment(self, assessment_id: str) -> Assessment | None: ...

    def get_assessment_by_token(self, token: str) -> Assessment | None: ...

    def add_assessment(self, assessment: Assessment) -> None: ...

    def save_assessment(self, assessment: Assessment, expected_version: int) -> None: ...

    def list_assessments(
        self,
        vendor_id: str | None = None,
        status: AssessmentStatus | None = None,
        verdict: Verdict | None = None,
    ) -> list[Assessment]: ...

    def get_vendor(self, vendor_id: str) -> Vendor | None: ...

    def add_vendor(self, vendor: Vendor) -> None: ...

    def list_vendors(self) -> list[Vendor]: ...

    def check(self) -> None: ...


class RecordLocks:
    """One lock per record id, created on first use."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @contextmanager
    def hold(self, record_id: str) -> Iterator[None]:
        with self._guard:
            record_lock = self._locks.setdefault(record_id, threading.Lock())
        with record_lock:
            yield


class DataStore:
    """Thread-safe in-memory data store for development and testing.

    Records are copied on the way in and out so callers never hold a
    reference to stored state.
    """

    def __init__(self) -> None:
        self.vendors: dict[str, Vendor] = {}
        self.assessments: dict[str, Assessment] = {}
        self._locks = RecordLocks()
        self._write_lock = threading.Lock()

    def reset(self) -> None:
        """Clear all data (used in tests)."""
        self.__init__()

    def lock(self, record_id: str) -> AbstractContextManager[None]:
        """Serialise writes to one record."""
        return self._locks.hold(record_id)

    def check(self) -> None:
        """Storage health probe; always passes in memory."""

    # ─── Vendors ─────────────────────────────────────────────────────────────

    def add_vendor(self, vendor: Vendor) -> None:
        """Add or update a vendor."""
        self.vendors[vendor.id] = vendor.model_copy(deep=True)

    def get_vendor(self, vendor_id: str) -> Vendor | None:
        """Get a vendor by id."""
        vendor = self.vendors.get(vendor_id)
        return vendor.model_copy(deep=True) if vendor else None

    def list_vendors(self) -> list[Vendor]:
        """All vendors ordered by name."""
        return sorted(
            (v.model_copy(deep=True) for v in self.vendors.values()),
            key=lambda v: v.name.lower(),
        )

    # ─── Assessments ─────────────────────────────────────────────────────────

    def get_assessment(self, assessment_id: str) -> Assessment | None:
        """Get an assessment by id."""
        assessment = self.assessments.get(assessment_id)
        return assessment.model_copy(deep=True) if assessment else None

    def get_assessment_by_token(self, token: str) -> Assessment | None:
        """Get the assessment a vendor self-service token belongs to."""
        for assessment in self.assessments.values():
            if assessment.vendor_token and assessment.vendor_token == token:
                return assessment.model_copy(deep=True)
        return None

    def add_assessment(self, assessment: Assessment) -> None:
        """Insert a new assessment."""
        with self._write_lock:
            if assessment.id in self.assessments:
                raise InvalidInputError(f"Assessment '{assessment.id}' already exists", field="id")
            self.assessments[assessment.id] = assessment.model_copy(deep=True)

    def save_assessment(self, assessment: Assessment, expected_version: int) -> None:
        """Replace a stored assessment if its version is still ``expected_version``."""
        with self._write_lock:
            current = self.assessments.get(assessment.id)
            actual = current.version if current else None
            if actual != expected_version:
                raise ConcurrentModificationError(
                    f"Assessment '{assessment.id}' was modified concurrently",
                    expected_version=expected_version,
                    actual_version=actual,
                )
            self.assessments[assessment.id] = assessment.model_copy(deep=True)

    def list_assessments(
        self,
        vendor_id: str | None = None,
        status: AssessmentStatus | None = None,
        verdict: Verdict | None = None,
    ) -> list[Assessment]:
        """Assessments matching every filter given, newest first."""
        results = []
        for assessment in self.assessments.values():
            if vendor_id and assessment.vendor_id != vendor_id:
                continue
            if status and assessment.status != status:
                continue
            if verdict and assessment.verdict != verdict:
                continue
            results.append(assessment.model_copy(deep=True))
        return sorted(results, key=lambda a: a.created_at, reverse=True)


# Global singleton, reset between tests
data_store = DataStore()
