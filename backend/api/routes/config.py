"""
Club configuration endpoint.

GET /config: organisation, season, club name and logo for the front end.

Values come from the file named by CLUB_CONFIG when set, with any still-missing
keys filled from the bundled config.json.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, Depends

from shared.config import Settings, get_settings
from shared.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["config"])

CLUB_CONFIG_KEYS = ("organisationId", "seasonId", "clubName", "logoPath")


def _read_json_file(path: Path) -> Optional[dict[str, Any]]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("club_config_unreadable", path=str(path), error=str(exc))
        return None
    if not isinstance(raw, dict):
        logger.warning("club_config_not_object", path=str(path))
        return None
    return raw


def load_club_config(settings: Settings) -> dict[str, Any]:
    config: dict[str, Any] = {key: None for key in CLUB_CONFIG_KEYS}

    if settings.club_config_path:
        path = settings.resolve_path(settings.club_config_path)
        if path.exists():
            loaded = _read_json_file(path)
            if loaded is not None:
                config.update(loaded)
                logger.info("club_config_loaded", path=str(path))
        else:
            logger.warning("club_config_missing", path=str(path))

    incomplete = not all(config.get(key) for key in CLUB_CONFIG_KEYS)
    bundled = settings.bundled_club_config
    if incomplete and bundled.exists():
        fallback = _read_json_file(bundled)
        if fallback is not None:
            for key in CLUB_CONFIG_KEYS:
                config[key] = config.get(key) or fallback.get(key)
            logger.info("club_config_fallback_loaded", path=str(bundled))

    return config


@router.get("/config")
async def get_club_config(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    return load_club_config(settings)
