import os
import sys
import datetime
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from csv_codec import (
    ParseError,
    decode_row,
    encode_field,
    encode_row,
    format_decimal,
    format_fixed,
    format_timestamp,
    parse_float,
    parse_int,
    parse_timestamp,
    require_columns,
)


class CsvCodecTestCase(unittest.TestCase):
    def test_plain_fields_round_trip(self) -> None:
        fields = ["abc", "Legs & Shoulders Day", "", "42", "3.5"]
        self.assertEqual(encode_row(fields), "abc,Legs & Shoulders Day,,42,3.5")
        self.assertEqual(decode_row(encode_row(fields)), fields)

    def test_quoting_rules(self) -> None:
        self.assertEqual(encode_field("plain"), "plain")
        self.assertEqual(encode_field("a,b"), '"a,b"')
        self.assertEqual(encode_field('say "hi"'), '"say ""hi"""')
        self.assertEqual(encode_field("two\nlines"), '"two\nlines"')
        self.assertEqual(encode_field(None), "")

    def test_quote_only_fields_round_trip(self) -> None:
        fields = ['say "hi"', '"', '""', 'end"']
        self.assertEqual(decode_row(encode_row(fields)), fields)

    def test_comma_fields_round_trip(self) -> None:
        fields = ["Squats: 4x10 @ 40.0kg => 16.00 kcal||Run, easy: 20 min => 150.00 kcal", "x"]
        self.assertEqual(decode_row(encode_row(fields)), fields)

    def test_decode_edge_cases(self) -> None:
        self.assertEqual(decode_row(""), [""])
        self.assertEqual(decode_row("a,,b"), ["a", "", "b"])
        self.assertEqual(decode_row('"",x'), ["", "x"])
        self.assertEqual(decode_row(None), [])

    def test_require_columns(self) -> None:
        require_columns(["a", "b"], 2)
        with self.assertRaises(ParseError):
            require_columns(["a"], 2)

    def test_number_parsing(self) -> None:
        self.assertEqual(parse_int(" 30 "), 30)
        self.assertEqual(parse_float("72.5"), 72.5)
        with self.assertRaises(ParseError):
            parse_int("thirty")
        with self.assertRaises(ParseError):
            parse_float("")

    def test_fixed_format(self) -> None:
        self.assertEqual(format_fixed(3.14159), "3.14")
        self.assertEqual(format_fixed(70), "70.00")

    def test_fixed_format_rounds_ties_up(self) -> None:
        self.assertEqual(format_fixed(7.125), "7.13")
        self.assertEqual(format_fixed(0.125), "0.13")
        self.assertEqual(format_fixed(1.005), "1.01")
        self.assertEqual(format_decimal(2.25, 1), "2.3")
        self.assertEqual(format_decimal(-2.25, 1), "-2.3")
        self.assertEqual(format_decimal(62.5, 1), "62.5")

    def test_timestamp_round_trip(self) -> None:
        ts = datetime.datetime(2024, 3, 1, 7, 30, 15, 123456)
        text = format_timestamp(ts)
        self.assertEqual(text, "2024-03-01T07:30:15.123456")
        self.assertEqual(parse_timestamp(text), ts)
        self.assertEqual(
            parse_timestamp("2024-03-01T07:30:15"),
            datetime.datetime(2024, 3, 1, 7, 30, 15),
        )

    def test_timestamp_errors(self) -> None:
        with self.assertRaises(ParseError):
            parse_timestamp("yesterday")
        with self.assertRaises(ParseError):
            parse_timestamp("2024-03-01T07:30:15+02:00")

    def test_timestamp_fraction_digits(self) -> None:
        expected = datetime.datetime(2024, 3, 1, 7, 30, 15, 123456)
        self.assertEqual(parse_timestamp("2024-03-01T07:30:15.123456789"), expected)
        self.assertEqual(
            parse_timestamp("2024-03-01T07:30:15.1"),
            datetime.datetime(2024, 3, 1, 7, 30, 15, 100000),
        )
        self.assertEqual(
            parse_timestamp("2024-03-01T07:30:15.12345"),
            datetime.datetime(2024, 3, 1, 7, 30, 15, 123450),
        )


if __name__ == "__main__":
    unittest.main()
