"""
Tests for the checksum engine.

INVARIANTS:
- Checksums do not depend on record order
- Empty input checksums to 0 and the empty string hashes to 0
- Identical inputs always give identical checksum and stats
"""

import random

from carddex.models.records import (
    CardVariant,
    DataStats,
    PersistenceAchievement,
    PersistenceCard,
    PersistenceWishlistCard,
)
from carddex.services.checksum import (
    compute_achievement_checksum,
    compute_collection_checksum,
    compute_full_checksum,
    compute_stats,
    compute_wishlist_checksum,
    hash_code,
)


class TestHashCode:
    def test_same_input_same_hash(self) -> None:
        assert hash_code("sv1-1|normal|2") == hash_code("sv1-1|normal|2")

    def test_different_input_different_hash(self) -> None:
        assert hash_code("sv1-1|normal|2") != hash_code("sv1-1|normal|3")

    def test_empty_string_is_zero(self) -> None:
        assert hash_code("") == 0

    def test_known_values(self) -> None:
        """Polynomial hash with multiplier 31."""
        assert hash_code("a") == 97
        assert hash_code("ab") == 97 * 31 + 98
        assert hash_code("hello") == 99162322

    def test_wraps_to_signed_32_bit(self) -> None:
        value = hash_code("x" * 50)
        assert -(2**31) <= value < 2**31

    def test_hashes_utf16_code_units(self) -> None:
        """Characters outside the BMP hash as their surrogate pair."""
        assert hash_code("\U0001f600") == 0xD83D * 31 + 0xDE00

    def test_long_strings(self) -> None:
        text = "sv1-1|normal|2;" * 1000
        assert len(text) >= 10_000
        assert isinstance(hash_code(text), int)
        assert hash_code(text) == hash_code(text)

    def test_special_characters(self) -> None:
        assert isinstance(hash_code("|;||\n\t\"'{}[]"), int)
        assert hash_code("a|b") != hash_code("a;b")


class TestCollectionChecksum:
    def test_empty_collection_is_zero(self) -> None:
        assert compute_collection_checksum([]) == 0

    def test_order_independent(self, sample_collection: list[PersistenceCard]) -> None:
        expected = compute_collection_checksum(sample_collection)

        assert compute_collection_checksum(list(reversed(sample_collection))) == expected

        shuffled = list(sample_collection)
        random.Random(7).shuffle(shuffled)
        assert compute_collection_checksum(shuffled) == expected

    def test_quantity_change_changes_checksum(self) -> None:
        two = [PersistenceCard(card_id="sv1-1", variant="normal", quantity=2)]
        three = [PersistenceCard(card_id="sv1-1", variant="normal", quantity=3)]
        assert compute_collection_checksum(two) != compute_collection_checksum(three)

    def test_variant_change_changes_checksum(self) -> None:
        normal = [PersistenceCard(card_id="sv1-1", variant="normal", quantity=2)]
        holo = [PersistenceCard(card_id="sv1-1", variant="holofoil", quantity=2)]
        assert compute_collection_checksum(normal) != compute_collection_checksum(holo)

    def test_enum_and_string_variants_agree(self) -> None:
        as_enum = [PersistenceCard(card_id="sv1-1", variant=CardVariant.HOLOFOIL, quantity=1)]
        as_str = [PersistenceCard(card_id="sv1-1", variant="holofoil", quantity=1)]
        assert compute_collection_checksum(as_enum) == compute_collection_checksum(as_str)

    def test_duplicate_keys_do_not_crash(self) -> None:
        card = PersistenceCard(card_id="sv1-1", variant="normal", quantity=1)
        single = compute_collection_checksum([card])
        doubled = compute_collection_checksum([card, card])
        assert single != doubled
        assert doubled == compute_collection_checksum([card, card])


class TestWishlistChecksum:
    def test_order_independent(self, sample_wishlist: list[PersistenceWishlistCard]) -> None:
        assert compute_wishlist_checksum(sample_wishlist) == compute_wishlist_checksum(
            list(reversed(sample_wishlist))
        )

    def test_priority_change_changes_checksum(self) -> None:
        flagged = [PersistenceWishlistCard(card_id="sv2-100", is_priority=True)]
        unflagged = [PersistenceWishlistCard(card_id="sv2-100", is_priority=False)]
        assert compute_wishlist_checksum(flagged) != compute_wishlist_checksum(unflagged)

    def test_empty_is_zero(self) -> None:
        assert compute_wishlist_checksum([]) == 0


class TestAchievementChecksum:
    def test_order_independent(self, sample_achievements: list[PersistenceAchievement]) -> None:
        assert compute_achievement_checksum(sample_achievements) == compute_achievement_checksum(
            list(reversed(sample_achievements))
        )

    def test_earned_at_change_changes_checksum(self) -> None:
        before = [PersistenceAchievement("collector_milestone", "first_card", 1000)]
        after = [PersistenceAchievement("collector_milestone", "first_card", 2000)]
        assert compute_achievement_checksum(before) != compute_achievement_checksum(after)


class TestComputeStats:
    def test_counts(
        self,
        sample_collection: list[PersistenceCard],
        sample_wishlist: list[PersistenceWishlistCard],
        sample_achievements: list[PersistenceAchievement],
    ) -> None:
        stats = compute_stats(sample_collection, sample_wishlist, sample_achievements)

        assert stats == DataStats(
            collection_cards=4,
            total_quantity=7,
            unique_card_ids=3,
            wishlist_cards=2,
            achievements=2,
        )

    def test_ordering_invariant_holds(self, sample_collection: list[PersistenceCard]) -> None:
        stats = compute_stats(sample_collection, [], [])
        assert stats.total_quantity >= stats.collection_cards >= stats.unique_card_ids >= 0

    def test_empty(self) -> None:
        assert compute_stats([], [], []).is_empty


class TestFullChecksum:
    def test_deterministic(
        self,
        sample_collection: list[PersistenceCard],
        sample_wishlist: list[PersistenceWishlistCard],
        sample_achievements: list[PersistenceAchievement],
    ) -> None:
        first = compute_full_checksum(sample_collection, sample_wishlist, sample_achievements)
        second = compute_full_checksum(sample_collection, sample_wishlist, sample_achievements)

        assert first.checksum == second.checksum
        assert first.stats == second.stats

    def test_order_independent_across_all_categories(
        self,
        sample_collection: list[PersistenceCard],
        sample_wishlist: list[PersistenceWishlistCard],
        sample_achievements: list[PersistenceAchievement],
    ) -> None:
        forward = compute_full_checksum(sample_collection, sample_wishlist, sample_achievements)
        backward = compute_full_checksum(
            list(reversed(sample_collection)),
            list(reversed(sample_wishlist)),
            list(reversed(sample_achievements)),
        )
        assert forward.checksum == backward.checksum

    def test_uses_given_timestamp(self) -> None:
        result = compute_full_checksum([], [], [], now=1234)
        assert result.timestamp == 1234

    def test_categories_are_not_interchangeable(self) -> None:
        """Moving data between categories changes the overall checksum."""
        card = [PersistenceCard(card_id="sv1-1", variant="normal", quantity=1)]
        wish = [PersistenceWishlistCard(card_id="sv1-1", is_priority=False)]

        with_card = compute_full_checksum(card, [], [])
        with_wish = compute_full_checksum([], wish, [])
        assert with_card.checksum != with_wish.checksum

    def test_any_change_changes_overall_checksum(
        self,
        sample_collection: list[PersistenceCard],
        sample_wishlist: list[PersistenceWishlistCard],
        sample_achievements: list[PersistenceAchievement],
    ) -> None:
        baseline = compute_full_checksum(sample_collection, sample_wishlist, sample_achievements)
        changed_wishlist = [PersistenceWishlistCard(card_id="sv2-100", is_priority=False)]
        changed = compute_full_checksum(sample_collection, changed_wishlist, sample_achievements)
        assert baseline.checksum != changed.checksum
