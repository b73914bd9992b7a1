"""
Operator descriptors for the prattle engine.

Defines the value types a grammar uses to describe each token's operator
shape:
- Precedence: a saturating unsigned 32-bit binding strength
- Associativity and Arity: how an operator nests and how many operands it takes
- Affix: where the operator's tokens sit relative to its operands, including
  the named composite variants for tokens that can both start and continue
  an expression
- Op: the immutable descriptor returned by a grammar's ``query`` callback

Author: xwest
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Sequence, Tuple


class Precedence(int):
    """
    Binding strength of an operator.

    Behaves like an unsigned 32-bit integer whose arithmetic saturates at
    ``MIN``/``MAX`` instead of wrapping. Declared precedences are passed
    through ``normalize()`` exactly once before they are compared, which
    leaves nine slots of slack between two neighbouring declared levels for
    ``raise_()``/``lower()`` adjustments.

    Declared precedences must lie in ``0..=MAX_DECLARED`` to keep that slack
    clear of the sentinels.
    """

    MIN: "Precedence"
    MAX: "Precedence"
    MAX_DECLARED: int

    BITS = 32

    def __new__(cls, value: int = 0) -> "Precedence":
        value = int(value)
        if value < 0 or value > (1 << cls.BITS) - 1:
            raise ValueError(
                f"Precedence must be within 0..={(1 << cls.BITS) - 1}, got {value}"
            )
        return super().__new__(cls, value)

    @classmethod
    def _saturate(cls, value: int) -> "Precedence":
        return cls(max(0, min(value, (1 << cls.BITS) - 1)))

    def raise_(self) -> "Precedence":
        """One step tighter; ``MAX`` stays ``MAX``."""
        return self._saturate(int(self) + 1)

    def lower(self) -> "Precedence":
        """One step looser; ``MIN`` stays ``MIN``."""
        return self._saturate(int(self) - 1)

    def normalize(self) -> "Precedence":
        """Scale a declared level into comparison space."""
        return self._saturate(int(self) * 10)

    def __repr__(self) -> str:
        if int(self) == (1 << self.BITS) - 1:
            return "Precedence.MAX"
        return f"Precedence({int(self)})"


Precedence.MIN = Precedence(0)
Precedence.MAX = Precedence((1 << Precedence.BITS) - 1)
# normalize(p).raise_() must stay strictly below MAX
Precedence.MAX_DECLARED = (int(Precedence.MAX) - 1) // 10 - 1


class Associativity(Enum):
    """How repeated occurrences of one binary or ternary operator nest."""
    LEFT = "left"        # a - b - c == (a - b) - c
    RIGHT = "right"      # a ^ b ^ c == a ^ (b ^ c)
    NEITHER = "neither"  # a = b = c is not a chain


class Arity(Enum):
    """Number of operands an operator builds a node from."""
    NULLARY = 0
    UNARY = 1
    BINARY = 2
    TERNARY = 3


class Affix(Enum):
    """
    Position of an operator's tokens relative to its operands.

    The four composite members describe a token that may start an expression
    (its leading role) and may also continue one (its continuation role).
    Build them with ``combine_affixes`` rather than by name.
    """

    NILFIX = "nilfix"
    PREFIX = "prefix"
    POSTFIX = "postfix"
    INFIX = "infix"
    CIRCUMFIX = "circumfix"
    INTERFIX = "interfix"

    # Composite variants
    NILFIX_INFIX = "nilfix|infix"
    NILFIX_POSTFIX = "nilfix|postfix"
    PREFIX_INFIX = "prefix|infix"
    PREFIX_POSTFIX = "prefix|postfix"

    @property
    def is_composite(self) -> bool:
        return self in _COMPOSITE_PARTS

    @property
    def leading(self) -> "Affix":
        """Role taken when the token starts an expression."""
        parts = _COMPOSITE_PARTS.get(self)
        return parts[0] if parts else self

    @property
    def continuing(self) -> "Affix":
        """Role taken when the token continues an expression."""
        parts = _COMPOSITE_PARTS.get(self)
        return parts[1] if parts else self

    @property
    def is_separator(self) -> bool:
        """True for tokens a mixfix operator may consume as a separator."""
        return self in (Affix.INTERFIX, Affix.CIRCUMFIX)


_COMPOSITE_PARTS: Dict[Affix, Tuple[Affix, Affix]] = {
    Affix.NILFIX_INFIX: (Affix.NILFIX, Affix.INFIX),
    Affix.NILFIX_POSTFIX: (Affix.NILFIX, Affix.POSTFIX),
    Affix.PREFIX_INFIX: (Affix.PREFIX, Affix.INFIX),
    Affix.PREFIX_POSTFIX: (Affix.PREFIX, Affix.POSTFIX),
}

_COMPOSITES: Dict[FrozenSet[Affix], Affix] = {
    frozenset(parts): composite for composite, parts in _COMPOSITE_PARTS.items()
}


def combine_affixes(first: Affix, second: Affix) -> Affix:
    """
    Merge a leading affix with a continuation affix.

    The order of the arguments does not matter. Combining an affix with
    itself returns it unchanged. Only one leading role (NILFIX, PREFIX) and
    one continuation role (INFIX, POSTFIX) can be merged; anything else
    raises ``ValueError``.
    """
    if first is second:
        return first
    composite = _COMPOSITES.get(frozenset((first, second)))
    if composite is None:
        raise ValueError(f"Cannot combine {first.name} with {second.name}")
    return composite


@dataclass(frozen=True)
class Op:
    """
    Operator descriptor for a single token.

    Built fresh by the grammar's ``query`` callback for every token the
    engine classifies; the engine never stores it.

    ``follow`` lists the separator tokens a mixfix operator expects, in
    order: ``("then", "else")`` for ``if``, ``("|",)`` for an absolute-value
    bar. The entries are compared with ``PrattParser.is_follow``.
    """

    affix: Affix
    arity: Arity
    precedence: Precedence = Precedence.MIN
    associativity: Associativity = Associativity.LEFT
    follow: Tuple[Any, ...] = ()
    # (leading, continuation) descriptors of a composite op
    roles: Optional[Tuple["Op", "Op"]] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.precedence, Precedence):
            object.__setattr__(self, "precedence", Precedence(self.precedence))
        if not isinstance(self.follow, tuple):
            object.__setattr__(self, "follow", tuple(self.follow))
        if self.affix.is_composite and self.roles is None:
            # A bare composite affix: the leading role is implied by the affix
            leading_arity = Arity.NULLARY if self.affix.leading is Affix.NILFIX else Arity.UNARY
            object.__setattr__(self, "roles", (
                Op(self.affix.leading, leading_arity, self.precedence, self.associativity),
                Op(self.affix.continuing, self.arity, self.precedence,
                   self.associativity, self.follow),
            ))

    # Role projection

    def leading(self) -> "Op":
        """Descriptor used when this token starts an expression."""
        return self.roles[0] if self.roles else self

    def continuing(self) -> "Op":
        """Descriptor used when this token continues an expression."""
        return self.roles[1] if self.roles else self

    def expects(self, index: int) -> bool:
        return index < len(self.follow)

    # Constructors

    @classmethod
    def nilfix(cls) -> "Op":
        return cls(Affix.NILFIX, Arity.NULLARY)

    @classmethod
    def interfix(cls) -> "Op":
        return cls(Affix.INTERFIX, Arity.NULLARY)

    @classmethod
    def prefix(cls, precedence: int) -> "Op":
        return cls(Affix.PREFIX, Arity.UNARY, precedence)

    @classmethod
    def postfix(cls, precedence: int) -> "Op":
        return cls(Affix.POSTFIX, Arity.UNARY, precedence)

    @classmethod
    def infix(cls, precedence: int,
              associativity: Associativity = Associativity.LEFT) -> "Op":
        return cls(Affix.INFIX, Arity.BINARY, precedence, associativity)

    @classmethod
    def circumfix(cls, precedence: int, closing: Any) -> "Op":
        return cls(Affix.CIRCUMFIX, Arity.UNARY, precedence, follow=(closing,))

    @classmethod
    def ternary(cls, affix: Affix, precedence: int, follow: Sequence[Any] = (),
                associativity: Associativity = Associativity.LEFT) -> "Op":
        """Mixfix operator with three operands, e.g. ``if a then b else c``."""
        return cls(affix, Arity.TERNARY, precedence, associativity, tuple(follow))

    @classmethod
    def either(cls, first: "Op", second: "Op") -> "Op":
        """
        Combine a leading-role op and a continuation-role op for one token.

        ``Op.either(Op.prefix(6), Op.infix(3))`` describes a minus sign that
        negates at precedence 6 and subtracts at precedence 3. Raises
        ``ValueError`` unless one op leads and the other continues.
        """
        affix = combine_affixes(first.affix, second.affix)
        if not affix.is_composite:
            raise ValueError(f"Both ops are {affix.name}; a token has one op per role")
        if first.affix is not affix.leading:
            first, second = second, first
        return replace(second, affix=affix, roles=(first, second))
