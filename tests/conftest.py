import pytest

from carddex.db.store import MemoryStore, NullStore
from carddex.models.records import (
    CardVariant,
    PersistenceAchievement,
    PersistenceCard,
    PersistenceWishlistCard,
)


@pytest.fixture
def memory_store() -> MemoryStore:
    """Empty working store."""
    return MemoryStore()


@pytest.fixture
def null_store() -> NullStore:
    """Store standing in for unavailable storage."""
    return NullStore()


@pytest.fixture
def sample_collection() -> list[PersistenceCard]:
    """Small collection with two variants of the same card."""
    return [
        PersistenceCard(card_id="sv1-1", variant=CardVariant.NORMAL, quantity=2),
        PersistenceCard(card_id="sv1-1", variant=CardVariant.HOLOFOIL, quantity=1),
        PersistenceCard(card_id="sv1-25", variant=CardVariant.REVERSE_HOLOFOIL, quantity=3),
        PersistenceCard(card_id="base1-4", variant=CardVariant.FIRST_EDITION_HOLOFOIL, quantity=1),
    ]


@pytest.fixture
def sample_wishlist() -> list[PersistenceWishlistCard]:
    return [
        PersistenceWishlistCard(card_id="sv2-100", is_priority=True),
        PersistenceWishlistCard(card_id="sv3-7", is_priority=False),
    ]


@pytest.fixture
def sample_achievements() -> list[PersistenceAchievement]:
    return [
        PersistenceAchievement(
            achievement_type="collector_milestone",
            achievement_key="first_card",
            earned_at=1767225600000,
        ),
        PersistenceAchievement(
            achievement_type="type_specialist",
            achievement_key="fire_10",
            earned_at=1767830400000,
        ),
    ]
