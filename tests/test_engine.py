"""
Test suite for the Pratt engine.

Uses a table-driven grammar over plain string tokens that builds
s-expression tuples, so each test states the operator table it relies on
and the exact tree it expects.

Tests cover:
- Associativity and precedence interleaving
- Prefix, postfix, circumfix and mixfix operators
- Composite affixes
- Separator policies, stop predicates and depth limits
- Error reporting

Author: xwest
"""

import os
import sys
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from prattle import (
    Affix, Arity, Associativity, EmptyInput, MissingInterfix, NestingTooDeep,
    Op, ParserConfig, PrattError, PrattParser, Precedence, TokenStream,
    TrailingInput, UnexpectedArity, UnexpectedInfix, UnexpectedInterfix,
    UnexpectedNilfix, UnexpectedPostfix, UnexpectedPrefix, UserError,
)
from prattle.errors import PRATT_ERROR_CODES

L, R, N = Associativity.LEFT, Associativity.RIGHT, Associativity.NEITHER

# Operator table of the arithmetic grammar used across the tests
ARITHMETIC = {
    "=": Op.infix(2, N),
    "+": Op.infix(3, L),
    "-": Op.either(Op.prefix(6), Op.infix(3, L)),
    "*": Op.infix(4, L),
    "/": Op.infix(4, L),
    "?": Op.postfix(5),
    "!": Op.prefix(6),
    "^": Op.infix(7, R),
}

MIXFIX = {
    "if": Op.ternary(Affix.PREFIX, 4, ("then", "else")),
    "then": Op.interfix(),
    "else": Op.interfix(),
    "?": Op.ternary(Affix.INFIX, 4, (":",), R),
    ":": Op.interfix(),
    "|": Op.circumfix(5, "|"),
    "=": Op.ternary(Affix.POSTFIX, 9),
    ":=": Op.ternary(Affix.POSTFIX, 1, ("in",), R),
    "in": Op.interfix(),
    "+": Op.infix(3, L),
}


class SExprParser(PrattParser):
    """Grammar over string tokens; lists are parenthesized groups."""

    def __init__(self, table, config=None):
        super().__init__(config)
        self.table = table
        self.queries = 0

    def query(self, token):
        self.queries += 1
        if isinstance(token, list):
            return Op.nilfix()
        if token in self.table:
            return self.table[token]
        if token.isalnum():
            return Op.nilfix()
        raise KeyError(token)

    def nullary(self, token):
        if isinstance(token, list):
            return self.parse(token)
        return token

    def unary(self, op, operand):
        return (op, operand)

    def binary(self, op, lhs, rhs):
        return (op, lhs, rhs)

    def ternary(self, op, first, second, third):
        return (op, first, second, third)


def tokens(text):
    return text.split()


class TestAssociativity(unittest.TestCase):

    def setUp(self):
        self.parser = SExprParser(ARITHMETIC)

    def test_left_associative(self):
        self.assertEqual(self.parser.parse(tokens("1 - 2 - 3")),
                         ("-", ("-", "1", "2"), "3"))

    def test_right_associative(self):
        self.assertEqual(self.parser.parse(tokens("2 ^ 3 ^ 2")),
                         ("^", "2", ("^", "3", "2")))

    def test_non_associative_stops_after_first_application(self):
        stream = TokenStream(tokens("1 = 2 = 3"))
        self.assertEqual(self.parser.parse(stream), ("=", "1", "2"))
        self.assertEqual(stream.peek(), "=")
        self.assertEqual(stream.position, 3)

    def test_non_associative_rejected_with_require_end(self):
        parser = SExprParser(ARITHMETIC, ParserConfig(require_end=True))
        with self.assertRaises(TrailingInput) as cm:
            parser.parse(tokens("1 = 2 = 3"))
        self.assertEqual(cm.exception.token, "=")

    def test_non_associative_around_tighter_operators(self):
        self.assertEqual(self.parser.parse(tokens("1 + 2 = 3 * 4")),
                         ("=", ("+", "1", "2"), ("*", "3", "4")))


class TestPrecedence(unittest.TestCase):

    def setUp(self):
        self.parser = SExprParser(ARITHMETIC)

    def test_factor_binds_tighter_than_term(self):
        self.assertEqual(self.parser.parse(tokens("1 * 2 + 3")),
                         ("+", ("*", "1", "2"), "3"))
        self.assertEqual(self.parser.parse(tokens("1 + 2 * 3")),
                         ("+", "1", ("*", "2", "3")))

    def test_prefix_then_postfix(self):
        self.assertEqual(self.parser.parse(tokens("- 1 ?")), ("?", ("-", "1")))

    def test_prefix_inside_infix(self):
        self.assertEqual(self.parser.parse(tokens("1 * ! 2 ^ 3")),
                         ("*", "1", ("!", ("^", "2", "3"))))

    def test_long_mixed_expression(self):
        expr = self.parser.parse(tokens("- 1 ? * ! 2 ^ 3 + 3 / 2 ? - 1"))
        self.assertEqual(expr, (
            "-",
            ("+",
             ("*", ("?", ("-", "1")), ("!", ("^", "2", "3"))),
             ("/", "3", ("?", "2"))),
            "1",
        ))

    def test_minus_is_prefix_and_infix(self):
        self.assertEqual(self.parser.parse(tokens("1 - - 2")), ("-", "1", ("-", "2")))

    def test_group_is_parsed_recursively(self):
        self.assertEqual(self.parser.parse([["1", "+", "2"], "*", "3"]),
                         ("*", ("+", "1", "2"), "3"))

    def test_group_matches_direct_parse(self):
        inner = tokens("1 - 2 * 3 ^ 4")
        self.assertEqual(self.parser.parse([inner]), self.parser.parse(list(inner)))

    def test_parse_accepts_generators(self):
        self.assertEqual(self.parser.parse(iter(tokens("1 + 2"))), ("+", "1", "2"))


class TestMixfix(unittest.TestCase):

    def setUp(self):
        self.parser = SExprParser(MIXFIX)

    def test_nested_if_binds_inner_else(self):
        expr = self.parser.parse(tokens("if a then if b then c else d else e"))
        self.assertEqual(expr, ("if", "a", ("if", "b", "c", "d"), "e"))

    def test_infix_ternary_is_right_associative(self):
        expr = self.parser.parse(tokens("1 ? 2 : 3 ? 4 : 5"))
        self.assertEqual(expr, ("?", "1", "2", ("?", "3", "4", "5")))

    def test_circumfix(self):
        expr = self.parser.parse(tokens("| x | + | y |"))
        self.assertEqual(expr, ("+", ("|", "x"), ("|", "y")))

    def test_nested_circumfix(self):
        self.assertEqual(self.parser.parse(tokens("| | x | |")), ("|", ("|", "x")))

    def test_postfix_ternary_without_separator(self):
        self.assertEqual(self.parser.parse(tokens("x = 1 y")), ("=", "x", "1", "y"))

    def test_ternary_without_follow_leaves_circumfix_operand(self):
        stream = TokenStream(tokens("x = 1 | y |"))
        self.assertEqual(self.parser.parse(stream), ("=", "x", "1", ("|", "y")))
        self.assertTrue(stream.is_at_end())

    def test_ternary_without_follow_eats_interfix(self):
        self.assertEqual(self.parser.parse(tokens("x = 1 then y")), ("=", "x", "1", "y"))

    def test_postfix_ternary_with_separator(self):
        expr = self.parser.parse(tokens("x := 1 in x + 1"))
        self.assertEqual(expr, (":=", "x", "1", ("+", "x", "1")))

    def test_missing_separator_is_tolerated(self):
        self.assertEqual(self.parser.parse(tokens("if a b else c")), ("if", "a", "b", "c"))
        self.assertEqual(self.parser.parse(tokens("| x")), ("|", "x"))

    def test_mismatched_separator_is_left_in_stream(self):
        with self.assertRaises(UnexpectedInterfix) as cm:
            self.parser.parse(tokens("if a else b then c"))
        self.assertEqual(cm.exception.token, "else")

    def test_strict_policy_requires_separators(self):
        parser = SExprParser(MIXFIX, ParserConfig(strict_interfix=True))
        with self.assertRaises(MissingInterfix) as cm:
            parser.parse(tokens("if a b else c"))
        self.assertEqual(cm.exception.expected, "then")
        self.assertEqual(cm.exception.found, "b")

        with self.assertRaises(MissingInterfix) as cm:
            parser.parse(tokens("| x"))
        self.assertIsNone(cm.exception.found)

        self.assertEqual(parser.parse(tokens("if a then b else c")), ("if", "a", "b", "c"))

    def test_strict_policy_ignores_ops_without_follow(self):
        parser = SExprParser(MIXFIX, ParserConfig(strict_interfix=True))
        self.assertEqual(parser.parse(tokens("x = 1 y")), ("=", "x", "1", "y"))

    def test_eat_interfix_returns_consumed_token(self):
        stream = TokenStream(tokens("then b"))
        self.assertEqual(self.parser.eat_interfix(stream, MIXFIX["if"], 0), "then")
        self.assertIsNone(self.parser.eat_interfix(stream, MIXFIX["if"], 1))
        self.assertEqual(stream.peek(), "b")


class TestCompositeAffixes(unittest.TestCase):

    def test_nilfix_infix(self):
        parser = SExprParser({"mod": Op.either(Op.nilfix(), Op.infix(4))})
        self.assertEqual(parser.parse(tokens("mod mod mod")), ("mod", "mod", "mod"))
        self.assertEqual(parser.parse(tokens("mod")), "mod")

    def test_nilfix_postfix(self):
        parser = SExprParser({"deg": Op(Affix.NILFIX_POSTFIX, Arity.UNARY, 5)})
        self.assertEqual(parser.parse(tokens("90 deg")), ("deg", "90"))
        self.assertEqual(parser.parse(tokens("deg")), "deg")

    def test_prefix_postfix(self):
        parser = SExprParser({"++": Op.either(Op.prefix(6), Op.postfix(5))})
        self.assertEqual(parser.parse(tokens("++ x ++")), ("++", ("++", "x")))


class TestParseUntil(unittest.TestCase):

    def setUp(self):
        self.parser = SExprParser(ARITHMETIC)

    def test_stop_predicate_leaves_delimiter(self):
        stream = TokenStream(tokens("1 + 2 ) * 3"))
        expr = self.parser.parse_until(stream, stop=lambda token: token == ")")
        self.assertEqual(expr, ("+", "1", "2"))
        self.assertEqual(stream.next(), ")")

    def test_stop_predicate_applies_to_operands(self):
        stream = TokenStream(tokens("- )"))
        with self.assertRaises(EmptyInput):
            self.parser.parse_until(stream, stop=lambda token: token == ")")

    def test_minimum_binding_power(self):
        stream = TokenStream(tokens("1 * 2 + 3"))
        expr = self.parser.parse_until(stream, Precedence(3).normalize())
        self.assertEqual(expr, ("*", "1", "2"))
        self.assertEqual(stream.peek(), "+")

        stream = TokenStream(tokens("1 + 2"))
        self.assertEqual(self.parser.parse_until(stream, Precedence(3).normalize()), "1")

    def test_continue_parsing_same_stream(self):
        stream = TokenStream(tokens("1 = 2 3 + 4"))
        self.assertEqual(self.parser.parse(stream), ("=", "1", "2"))
        self.assertEqual(self.parser.parse(stream), ("+", "3", "4"))
        self.assertTrue(stream.is_at_end())


class TestBindingPowers(unittest.TestCase):

    def setUp(self):
        self.parser = SExprParser({})

    def test_lbp(self):
        self.assertEqual(self.parser.lbp(Op.nilfix()), Precedence.MIN)
        self.assertEqual(self.parser.lbp(Op.prefix(6)), Precedence.MIN)
        self.assertEqual(self.parser.lbp(Op.postfix(5)), 50)
        self.assertEqual(self.parser.lbp(Op.infix(3)), 30)
        self.assertEqual(self.parser.lbp(Op.either(Op.prefix(6), Op.infix(3))), 30)

    def test_nbp(self):
        self.assertEqual(self.parser.nbp(Op.nilfix()), Precedence.MAX)
        self.assertEqual(self.parser.nbp(Op.prefix(6)), Precedence.MAX)
        self.assertEqual(self.parser.nbp(Op.postfix(5)), Precedence.MAX)
        self.assertEqual(self.parser.nbp(Op.infix(3, L)), 31)
        self.assertEqual(self.parser.nbp(Op.infix(3, R)), 31)
        self.assertEqual(self.parser.nbp(Op.infix(3, N)), 30)

    def test_rbp(self):
        self.assertEqual(self.parser.rbp(Op.infix(3, L)), 30)
        self.assertEqual(self.parser.rbp(Op.infix(3, R)), 29)
        self.assertEqual(self.parser.rbp(Op.infix(3, N)), 31)

    def test_zero_precedence_right_operator_saturates(self):
        self.assertEqual(self.parser.rbp(Op.infix(0, R)), Precedence.MIN)


class TestErrors(unittest.TestCase):

    def setUp(self):
        self.parser = SExprParser(dict(ARITHMETIC, **MIXFIX))

    def test_empty_input(self):
        with self.assertRaises(EmptyInput) as cm:
            self.parser.parse([])
        self.assertEqual(cm.exception.code, "E001")
        self.assertEqual(str(cm.exception), "Pratt parser was called with empty input.")

    def test_missing_right_operand(self):
        with self.assertRaises(EmptyInput):
            self.parser.parse(tokens("1 +"))

    def test_unexpected_infix(self):
        with self.assertRaises(UnexpectedInfix) as cm:
            self.parser.parse(tokens("* 1"))
        self.assertEqual(cm.exception.token, "*")
        self.assertIn("Expected Nilfix or Prefix, found Infix", str(cm.exception))

    def test_unexpected_postfix(self):
        parser = SExprParser(ARITHMETIC)
        with self.assertRaises(UnexpectedPostfix):
            parser.parse(tokens("? 1"))

    def test_unexpected_interfix(self):
        with self.assertRaises(UnexpectedInterfix):
            self.parser.parse(tokens("then"))

    def test_led_rejects_leading_only_ops(self):
        stream = TokenStream([])
        with self.assertRaises(UnexpectedNilfix):
            self.parser.led("x", stream, Op.nilfix(), "lhs")
        with self.assertRaises(UnexpectedPrefix):
            self.parser.led("!", stream, Op.prefix(6), "lhs")
        with self.assertRaises(UnexpectedInterfix):
            self.parser.led("then", stream, Op.interfix(), "lhs")

    def test_unsupported_arity(self):
        parser = SExprParser({"@": Op(Affix.PREFIX, Arity.BINARY, 3)})
        with self.assertRaises(UnexpectedArity) as cm:
            parser.parse(tokens("@ 1"))
        self.assertEqual(cm.exception.code, "E007")

    def test_query_failure_is_wrapped(self):
        with self.assertRaises(UserError) as cm:
            self.parser.parse(tokens("1 $ 2"))
        self.assertIsInstance(cm.exception.error, KeyError)
        self.assertIs(cm.exception.__cause__, cm.exception.error)

    def test_builder_failure_is_wrapped(self):
        class Failing(SExprParser):
            def binary(self, op, lhs, rhs):
                raise ValueError("no binary nodes here")

        with self.assertRaises(UserError) as cm:
            Failing(ARITHMETIC).parse(tokens("1 + 2"))
        self.assertEqual(str(cm.exception), "no binary nodes here")

    def test_nested_errors_pass_through_unwrapped(self):
        with self.assertRaises(EmptyInput):
            self.parser.parse([[], "+", "1"])

    def test_all_errors_are_pratt_errors(self):
        for source in ["", "1 +", "* 1", "then", "1 $"]:
            with self.assertRaises(PrattError):
                self.parser.parse(tokens(source))

    def test_error_code_table(self):
        self.assertEqual(len(PRATT_ERROR_CODES), 11)
        for code, cls in PRATT_ERROR_CODES.items():
            self.assertEqual(cls.code, code)
            self.assertTrue(issubclass(cls, PrattError))
            self.assertTrue(cls.help_text)

    def test_render_includes_code_and_help(self):
        try:
            self.parser.parse([])
        except EmptyInput as e:
            rendered = e.render()
        self.assertIn("ERROR[E001]", rendered)
        self.assertIn("help:", rendered)


class TestNestingDepth(unittest.TestCase):

    def test_deep_prefix_chain_is_rejected(self):
        parser = SExprParser(ARITHMETIC, ParserConfig(max_depth=50))
        with self.assertRaises(NestingTooDeep) as cm:
            parser.parse(["-"] * 100 + ["1"])
        self.assertEqual(cm.exception.limit, 50)

    def test_depth_resets_after_error(self):
        parser = SExprParser(ARITHMETIC, ParserConfig(max_depth=50))
        with self.assertRaises(NestingTooDeep):
            parser.parse(["-"] * 100 + ["1"])
        expr = parser.parse(["-"] * 40 + ["1"])
        for _ in range(40):
            self.assertEqual(expr[0], "-")
            expr = expr[1]
        self.assertEqual(expr, "1")

    def test_nested_groups_count_towards_depth(self):
        parser = SExprParser(ARITHMETIC, ParserConfig(max_depth=10))
        group = ["1"]
        for _ in range(20):
            group = [group]
        with self.assertRaises(NestingTooDeep):
            parser.parse(group)

    def test_default_limit_stays_below_recursion_limit(self):
        parser = SExprParser(ARITHMETIC)
        with self.assertRaises(NestingTooDeep):
            parser.parse(["-"] * 5000 + ["1"])

    def test_deep_groups_at_default_limit(self):
        parser = SExprParser(ARITHMETIC)
        group = ["1"]
        for _ in range(180):
            group = [group]
        with self.assertRaises(NestingTooDeep) as cm:
            parser.parse(group)
        self.assertEqual(cm.exception.limit, 200)

    def test_stack_exhaustion_is_reported_as_nesting(self):
        parser = SExprParser(ARITHMETIC, ParserConfig(max_depth=10 ** 6))
        group = ["1"]
        for _ in range(sys.getrecursionlimit()):
            group = [group]
        with self.assertRaises(NestingTooDeep) as cm:
            parser.parse(group)
        self.assertIsNotNone(cm.exception.depth)
        self.assertIsInstance(cm.exception.__cause__, RecursionError)
        self.assertEqual(parser.parse(["1", "+", "2"]), ("+", "1", "2"))

    def test_invalid_limit(self):
        with self.assertRaises(ValueError):
            ParserConfig(max_depth=0)


if __name__ == "__main__":
    unittest.main()
