"""Test code for the parser module.

Copyright (C) 2025 Paulo Ferreira de Castro

Licensed under the Open Software License version 3.0, a copy of which can be
found in the LICENSE file.
"""

import unittest
from dataclasses import dataclass

from switch_parser.binder import FieldBinding, FieldKind
from switch_parser.error import SwitchValueError
from switch_parser.parser import ArgumentParser, classify


class TestClassify(unittest.TestCase):
    def test_switches_are_consumed_and_never_targets(self):
        test_inputs: list[tuple[list[str], set[int], list[str]]] = [
            ([], set(), []),
            (["alpha", "-v", "beta"], {1}, ["alpha", "beta"]),
            (["a", "-x", "--y", "-", "--", "b"], {1, 2, 3, 4}, ["a", "b"]),
            (["--only", "--switches"], {0, 1}, []),
        ]
        for tokens, expected_consumed, expected_targets in test_inputs:
            result = classify(tokens)
            self.assertEqual(result.consumed, expected_consumed, tokens)
            self.assertEqual(result.targets(), expected_targets, tokens)

    def test_bare_dashes_are_switches(self):
        result = classify(["-", "--"])
        self.assertTrue(result.is_switch_present("-"))
        self.assertTrue(result.is_switch_present("--"))

    def test_duplicate_switch_keeps_last_index(self):
        result = classify(["-x", "1", "-x", "2"])
        self.assertEqual(dict(result.switch_indices), {"-x": 2})
        self.assertEqual(result.consumed, {0, 2})

    def test_resolvers_do_not_mutate_receiver(self):
        result = classify(["-o", "out.txt", "--tags", "a", "b"])
        value, after_value = result.switch_value("-o")
        values, after_values = after_value.switch_values("--tags")
        self.assertEqual(value, "out.txt")
        self.assertEqual(values, ["a", "b"])
        self.assertEqual(result.consumed, {0, 2})
        self.assertEqual(after_value.consumed, {0, 1, 2})
        self.assertEqual(after_values.consumed, {0, 1, 2, 3, 4})

    def test_nothing_to_consume_returns_same_result(self):
        result = classify(["-v"])
        _, same = result.switch_value("-v")
        _, missing = result.switch_values("--missing")
        self.assertIs(same, result)
        self.assertIs(missing, result)


class TestArgumentParser(unittest.TestCase):
    def test_single_value_is_greedy(self):
        parser = ArgumentParser(["-d", "report.txt", "--laf", "Nimbus"])
        self.assertEqual(parser.get_switch_value("-d"), "report.txt")
        self.assertEqual(parser.get_targets(), ["Nimbus"])
        self.assertEqual(parser.get_switch_value("--laf"), "Nimbus")
        self.assertEqual(parser.get_targets(), [])

    def test_single_value_claims_following_switch(self):
        parser = ArgumentParser(["-v", "--out", "x"])
        self.assertEqual(parser.get_switch_value("-v"), "--out")
        # The claimed switch still resolves through its own index entry.
        self.assertTrue(parser.is_switch_present("--out"))
        self.assertEqual(parser.get_switch_value("--out"), "x")

    def test_single_value_at_end_returns_default(self):
        parser = ArgumentParser(["target", "-o"])
        self.assertIsNone(parser.get_switch_value("-o"))
        self.assertEqual(parser.get_switch_value("-o", "fallback"), "fallback")
        self.assertEqual(parser.get_targets(), ["target"])

    def test_multi_value_stops_at_switch(self):
        parser = ArgumentParser(["--tags", "a", "b", "-x"])
        self.assertEqual(parser.get_switch_values("--tags"), ["a", "b"])
        self.assertEqual(parser.get_switch_values("-x"), [])
        self.assertTrue(parser.is_switch_present("-x"))
        self.assertEqual(parser.get_targets(), [])

    def test_absent_switch(self):
        parser = ArgumentParser([])
        self.assertFalse(parser.is_switch_present("--missing"))
        self.assertEqual(parser.get_switch_value("--missing", "fallback"), "fallback")
        self.assertIsNone(parser.get_switch_value("--missing"))
        self.assertEqual(parser.get_switch_values("--missing"), [])
        self.assertEqual(parser.get_switch_long_value("--missing", 3), 3)
        self.assertEqual(parser.get_switch_double_value("--missing", 1.5), 1.5)

    def test_targets_reflect_resolver_calls(self):
        parser = ArgumentParser(["alpha", "-v", "beta"])
        self.assertEqual(parser.get_targets(), ["alpha", "beta"])
        self.assertTrue(parser.is_switch_present("-v"))
        self.assertEqual(parser.get_targets(), ["alpha", "beta"])
        self.assertEqual(parser.get_switch_values("-v"), ["beta"])
        self.assertEqual(parser.get_targets(), ["alpha"])

    def test_duplicate_switch_value(self):
        parser = ArgumentParser(["-x", "1", "-x", "2"])
        self.assertEqual(parser.get_switch_value("-x"), "2")
        self.assertEqual(parser.get_targets(), ["1"])

    def test_resolving_twice_is_idempotent(self):
        parser = ArgumentParser(["-o", "a", "--tags", "b", "c", "d"])
        parser.get_switch_value("-o")
        parser.get_switch_values("--tags")
        consumed = parser.result.consumed
        parser.get_switch_value("-o")
        parser.get_switch_values("--tags")
        self.assertEqual(parser.result.consumed, consumed)

    def test_parse_resets_state(self):
        parser = ArgumentParser(["-o", "out.txt"])
        parser.get_switch_value("-o")
        parser.parse(["target"])
        self.assertFalse(parser.is_switch_present("-o"))
        self.assertEqual(parser.result.consumed, frozenset())
        self.assertEqual(parser.get_targets(), ["target"])
        self.assertEqual(parser.arguments, ("target",))

    def test_long_value(self):
        test_inputs: list[tuple[list[str], int | None]] = [
            (["-n", "42"], 42),
            (["-n", "+5"], 5),
            # "-7" looks like a switch but the single resolver claims it anyway.
            (["-n", "-7"], -7),
            (["-n", "9223372036854775807"], 2**63 - 1),
            (["-n"], None),
        ]
        for tokens, expected in test_inputs:
            parser = ArgumentParser(tokens)
            self.assertEqual(parser.get_switch_long_value("-n"), expected, tokens)

    def test_long_value_errors_propagate(self):
        for text in ["abc", "4.2", " 42", "1_000", "9223372036854775808", ""]:
            parser = ArgumentParser(["-n", text])
            with self.assertRaises(SwitchValueError, msg=text) as cm:
                parser.get_switch_long_value("-n", 0)
            self.assertIsInstance(cm.exception, ValueError)
            self.assertEqual(cm.exception.switch_name, "-n")
            self.assertEqual(cm.exception.text, text)

    def test_double_value(self):
        parser = ArgumentParser(["--ratio", "2.5", "--bad", "two"])
        self.assertEqual(parser.get_switch_double_value("--ratio"), 2.5)
        with self.assertRaises(SwitchValueError) as cm:
            parser.get_switch_double_value("--bad", 1.0)
        self.assertIsInstance(cm.exception, ValueError)
        self.assertEqual(cm.exception.text, "two")

    def test_double_value_syntax(self):
        test_inputs: list[tuple[str, float]] = [
            ("2.5", 2.5),
            ("-1e3", -1000.0),
            (".5", 0.5),
            ("3.", 3.0),
            (" 4.25 ", 4.25),
            ("7d", 7.0),
            ("1.5F", 1.5),
            ("Infinity", float("inf")),
            ("-Infinity", float("-inf")),
        ]
        for text, expected in test_inputs:
            parser = ArgumentParser(["-r", text])
            self.assertEqual(parser.get_switch_double_value("-r"), expected, text)
        nan = ArgumentParser(["-r", "NaN"]).get_switch_double_value("-r")
        self.assertNotEqual(nan, nan)

    def test_double_value_rejects_non_decimal_syntax(self):
        for text in ["1_000", "inf", "nan", "infinity", "0x1p3", ".", "1e", ""]:
            parser = ArgumentParser(["-r", text])
            with self.assertRaises(SwitchValueError, msg=text):
                parser.get_switch_double_value("-r")

    def test_rejects_single_string(self):
        with self.assertRaises(TypeError):
            ArgumentParser("-ab")  # pyright: ignore[reportArgumentType]
        with self.assertRaises(TypeError):
            classify("-ab")

    def test_parse_result_is_hashable(self):
        first = classify(["-o", "out.txt"])
        second = classify(["-o", "out.txt"])
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertEqual(len({first, second, first.switch_value("-o")[1]}), 2)

    def test_get_argument(self):
        parser = ArgumentParser(["a", "-b"])
        self.assertEqual(parser.arguments, ("a", "-b"))
        self.assertEqual(parser.get_argument(0), "a")
        self.assertEqual(parser.get_argument(1), "-b")
        for idx in [2, -1]:
            with self.assertRaises(IndexError):
                parser.get_argument(idx)

    def test_bind_struct_leaves_targets(self):
        @dataclass
        class Options:
            output_path: str = ""

        parser = ArgumentParser(["-output-path", "out.txt", "extra"])
        options = parser.bind_struct(Options)
        self.assertEqual(options.output_path, "out.txt")
        self.assertEqual(parser.get_targets(), ["out.txt", "extra"])

    def test_bind_struct_with_explicit_bindings(self):
        @dataclass
        class Options:
            verbose: bool = False
            output_path: str = ""

        parser = ArgumentParser(["-verbose", "-output-path", "out.txt"])
        options = parser.bind_struct(
            Options, [FieldBinding("output_path", FieldKind.STRING)]
        )
        self.assertEqual(options, Options(output_path="out.txt"))


# Tests can be run with the command line:
# python -m unittest switch_parser.test.test_parser
if __name__ == "__main__":
    unittest.main()
