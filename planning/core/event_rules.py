# planning/core/event_rules.py
"""
Regras por tipo de evento (sobreposição, papéis atribuíveis, cores).

As tabelas são dados versionados: o padrão está em DEFAULT_RULES e pode ser
substituído por um JSON com o mesmo formato (settings.EVENT_RULES_FILE).
São carregadas uma única vez e ficam imutáveis (frozenset/MappingProxyType).
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from planning.core.config import settings

logger = logging.getLogger(__name__)

ADMIN_ROLE = "administrateur"

DEFAULT_RULES: Dict[str, Any] = {
    "version": 1,
    "max_shows_per_room_per_day": 5,
    "default_color": "#4CAF50",
    "aliases": {"régie": "regie"},
    "types": {
        "show": {
            "label": "Spectacle",
            "can_overlap": ["permanence", "ticketing", "regie"],
            "assignable_roles": ["artiste", ADMIN_ROLE],
            "color": "#7C3AED",
        },
        "permanence": {
            "label": "Permanence",
            "can_overlap": ["show", "ticketing", "regie", "rental", "calage", "event"],
            "assignable_roles": ["permanence", ADMIN_ROLE],
            "color": "#10B981",
        },
        "ticketing": {
            "label": "Billetterie",
            "can_overlap": ["show", "permanence", "regie", "rental", "calage", "event"],
            "assignable_roles": ["billeterie", ADMIN_ROLE],
            "color": "#2563EB",
        },
        "regie": {
            "label": "Régie",
            "can_overlap": ["show", "permanence", "ticketing", "rental", "calage", "event"],
            "assignable_roles": ["regie", ADMIN_ROLE],
            "color": "#EC4899",
        },
        "rental": {
            "label": "Location",
            "can_overlap": ["permanence", "ticketing", "regie"],
            "assignable_roles": [],
            "color": "#0EA5E9",
        },
        "calage": {
            "label": "Calage",
            "can_overlap": ["permanence", "ticketing", "regie"],
            "assignable_roles": [],
            "color": "#D97706",
        },
        "event": {
            "label": "Événement",
            "can_overlap": ["permanence", "ticketing", "regie"],
            "assignable_roles": [],
            "color": "#4CAF50",
        },
    },
    "show_statuses": {
        "provisional": {"label": "Provisoire", "color": "#F59E0B"},
        "confirmed": {"label": "Confirmé", "color": "#16A34A"},
        "ticketsOpen": {"label": "Billetterie ouverte", "color": "#DC2626"},
    },
}


@dataclass(frozen=True)
class EventRules:
    version: int
    types: Tuple[str, ...]
    labels: Mapping[str, str]
    compatible: Mapping[str, FrozenSet[str]]
    assignable_roles: Mapping[str, FrozenSet[str]]
    type_colors: Mapping[str, str]
    show_statuses: Tuple[str, ...]
    status_colors: Mapping[str, str]
    aliases: Mapping[str, str]
    max_shows_per_room_per_day: int
    default_color: str

    def normalize_type(self, value: str) -> str:
        name = self.aliases.get(value, value)
        if name not in self.compatible:
            raise ValueError(f"Type d'événement inconnu : {value!r}")
        return name

    def can_overlap(self, candidate_type: str, existing_type: str) -> bool:
        # consulta só a linha do candidato; a tabela já é simétrica
        return existing_type in self.compatible.get(candidate_type, frozenset())

    def eligible_roles(self, event_type: str) -> FrozenSet[str]:
        return self.assignable_roles.get(event_type, frozenset())

    def assignment_enabled(self, event_type: str) -> bool:
        return bool(self.eligible_roles(event_type))

    def color_for(self, event_type: str, show_status: Optional[str] = None) -> str:
        if event_type == "show" and show_status in self.status_colors:
            return self.status_colors[show_status]
        return self.type_colors.get(event_type, self.default_color)

    def ordered(self, names) -> list[str]:
        wanted = set(names)
        return [t for t in self.types if t in wanted]


def build_rules(data: Mapping[str, Any]) -> EventRules:
    types_cfg: Mapping[str, Mapping[str, Any]] = data["types"]
    names = tuple(types_cfg.keys())

    compat: Dict[str, set] = {name: set() for name in names}
    for name, cfg in types_cfg.items():
        for other in cfg.get("can_overlap", []):
            if other not in compat:
                raise ValueError(f"{name}: type inconnu dans can_overlap ({other})")
            # simetriza por união: A aceita B => B aceita A
            compat[name].add(other)
            compat[other].add(name)

    statuses = data.get("show_statuses", {})
    return EventRules(
        version=int(data.get("version", 1)),
        types=names,
        labels=MappingProxyType({n: cfg.get("label", n) for n, cfg in types_cfg.items()}),
        compatible=MappingProxyType({n: frozenset(v) for n, v in compat.items()}),
        assignable_roles=MappingProxyType(
            {n: frozenset(cfg.get("assignable_roles", [])) for n, cfg in types_cfg.items()}
        ),
        type_colors=MappingProxyType({n: cfg["color"] for n, cfg in types_cfg.items() if cfg.get("color")}),
        show_statuses=tuple(statuses.keys()),
        status_colors=MappingProxyType({s: cfg["color"] for s, cfg in statuses.items() if cfg.get("color")}),
        aliases=MappingProxyType(dict(data.get("aliases", {}))),
        max_shows_per_room_per_day=int(data.get("max_shows_per_room_per_day", 5)),
        default_color=data.get("default_color", "#4CAF50"),
    )


def load_rules(path: Optional[str] = None) -> EventRules:
    if not path:
        return build_rules(DEFAULT_RULES)
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    rules = build_rules(data)
    logger.info("Regras de eventos carregadas de %s (versão %s)", path, rules.version)
    return rules


@lru_cache(maxsize=1)
def get_rules() -> EventRules:
    return load_rules(settings.EVENT_RULES_FILE)
