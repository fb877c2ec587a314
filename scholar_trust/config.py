from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_MAX_REQUIRED_GPA = 400


@dataclass(frozen=True, slots=True)
class ContractConfig:
    """Static contract metadata plus the GPA scale bound (350 means 3.50)."""

    name: str = "Scholar Trust"
    version: str = "1.0.0"
    description: str = "Milestone-based scholarship fund management system"
    contract_name: str = "scholar_trust"
    max_required_gpa: int = DEFAULT_MAX_REQUIRED_GPA

    def __post_init__(self) -> None:
        for field_name in ("name", "version", "contract_name"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Contract config '{field_name}' must be a non-empty string.")
        if isinstance(self.max_required_gpa, bool) or not isinstance(self.max_required_gpa, int):
            raise ValueError("Contract config 'max_required_gpa' must be an integer.")
        if self.max_required_gpa <= 0:
            raise ValueError("Contract config 'max_required_gpa' must be positive.")

    @classmethod
    def baseline(cls) -> ContractConfig:
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> ContractConfig:
        values = payload or {}
        baseline = cls.baseline()
        return cls(
            name=str(values.get("name", baseline.name)),
            version=str(values.get("version", baseline.version)),
            description=str(values.get("description", baseline.description)),
            contract_name=str(values.get("contract_name", baseline.contract_name)),
            max_required_gpa=int(values.get("max_required_gpa", baseline.max_required_gpa)),
        )

    def custody_identity(self, owner: str) -> str:
        return f"{owner}.{self.contract_name}"

    def contract_info(self) -> dict[str, str]:
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "contract_name": self.contract_name,
            "max_required_gpa": self.max_required_gpa,
        }


DEFAULT_CONTRACT_CONFIG = ContractConfig()
