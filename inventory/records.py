"""
Typed records passed between the menu services, the resolver and the views.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from .validators import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    clean_text,
    normalize_language_code,
)


@dataclass(frozen=True)
class TranslationInput:
    """
    One language's name and description as submitted by an admin.

    Validates on construction: the language code is normalized, markup is
    stripped, the name is required and both fields are length-capped.
    """
    language_code: str
    name: str
    description: str = ''

    def __post_init__(self):
        object.__setattr__(self, 'language_code', normalize_language_code(self.language_code))
        object.__setattr__(self, 'name', clean_text(self.name, NAME_MAX_LENGTH, 'name', required=True))
        object.__setattr__(
            self, 'description', clean_text(self.description, DESCRIPTION_MAX_LENGTH, 'description')
        )


@dataclass(frozen=True)
class ResolvedMenuType:
    id: int
    name: str
    description: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ResolvedCategory:
    id: int
    menu_type_id: int
    name: str
    description: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ResolvedMenuItem:
    id: int
    category_id: int
    menu_type_id: int
    name: str
    description: str
    category: str
    menu_type: str
    price: Decimal
    image: Optional[str]
    image_missing: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    display_order: int = 0
    is_active: bool = True
    is_featured: bool = False


@dataclass
class DeletionReport:
    """What a cascading delete removed, for flash messages and the audit log"""
    entity: str
    entity_id: int
    names: dict = field(default_factory=dict)
    counts: dict = field(default_factory=dict)
    deleted_images: List[str] = field(default_factory=list)
    failed_images: List[str] = field(default_factory=list)

    def as_dict(self):
        return {
            'entity': self.entity,
            'entity_id': self.entity_id,
            'names': self.names,
            'counts': self.counts,
            'deleted_images': self.deleted_images,
            'failed_images': self.failed_images,
        }
