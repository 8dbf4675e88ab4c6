from __future__ import annotations

from mastery.services import Services, get_services


def services() -> Services:
    return get_services()
