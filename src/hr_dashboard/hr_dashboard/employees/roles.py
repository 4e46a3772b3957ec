from __future__ import annotations

from ..core.enums import Role

# Checked in order; first match wins.
_POSITION_RULES: tuple[tuple[str, Role], ...] = (
    ("chief", Role.EXECUTIVE),
    ("hr manager", Role.HR_MANAGER),
    ("hr team leader", Role.HR_SPECIALIST),
    ("hr specialist", Role.HR_SPECIALIST),
    ("hr rank and file", Role.HR_ASSISTANT),
    ("hr assistant", Role.HR_ASSISTANT),
)


def role_for_position(position: str | None) -> Role:
    """Map a job title onto the session role. Unknown titles get the Employee role."""
    title = (position or "").strip().lower()
    for needle, role in _POSITION_RULES:
        if needle in title:
            return role
    return Role.EMPLOYEE
