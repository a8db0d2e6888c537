"""
Aggregation operators: one Monoid, from which the Combiner and the Reducer
are both derived.

A combiner is only safe when the operator is associative and commutative:

    reduce(combine(A), combine(B)) == reduce(A + B)

for every split {A, B} of a key's values. Counting uses integer addition,
which satisfies both, so pre-aggregating per partition never changes the
result. Python ints do not overflow, so totals are exact at any size.
"""

from collections.abc import Callable, Iterable
from operator import add
from typing import Any, NamedTuple, TypeVar

from src.airport_counts.errors import NonAssociativeOperatorError
from src.airport_counts.shuffle import group_by_key

K = TypeVar("K")
V = TypeVar("V")


class Monoid(NamedTuple):
    """An identity element plus a binary combine function."""

    identity: Any
    combine: Callable[[Any, Any], Any]
    associative: bool = True
    commutative: bool = True

    @property
    def combiner_safe(self) -> bool:
        return self.associative and self.commutative

    def fold(self, values: Iterable[Any]) -> Any:
        """Fold values starting from the identity."""
        result = self.identity
        for value in values:
            result = self.combine(result, value)
        return result


SUM = Monoid(0, add)


def make_reducer(monoid: Monoid = SUM) -> Callable[[K, Iterable[V]], tuple[K, V]]:
    """Build reduce(key, values) -> (key, total) over the monoid."""

    def reduce(key: K, values: Iterable[V]) -> tuple[K, V]:
        return (key, monoid.fold(values))

    return reduce


def make_combiner(monoid: Monoid = SUM) -> Callable[[K, Iterable[V]], tuple[K, V]]:
    """
    Build combine(key, values) -> (key, partial) over the monoid.

    The combiner is the reducer: same operator, applied to a partition's
    local bucket instead of the global one.

    Raises:
        NonAssociativeOperatorError: If the operator cannot be pre-aggregated
    """
    if not monoid.combiner_safe:
        raise NonAssociativeOperatorError(
            "combiner requires an associative and commutative operator; "
            "run without a combiner instead"
        )
    return make_reducer(monoid)


def combine_partition(
    pairs: Iterable[tuple[K, V]],
    monoid: Monoid = SUM,
) -> list[tuple[K, V]]:
    """
    Pre-aggregate one partition's pairs: one (key, partial) per local key.

    Args:
        pairs: Mapper output of a single partition
        monoid: Aggregation operator (must be combiner-safe)

    Returns:
        Compacted list of pairs, at most one per distinct key
    """
    combine = make_combiner(monoid)
    return [combine(key, values) for key, values in group_by_key(pairs).items()]
