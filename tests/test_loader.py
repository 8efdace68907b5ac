import tempfile
import unittest
from io import BytesIO, StringIO
from pathlib import Path

import pandas as pd

from africa_covid.config import COUNT_COLUMNS, COUNTRY_COL, DATE_COL, REGION_COL, REQUIRED_COLUMNS, Region
from africa_covid.loader import ParseError, load_cases

from tests.fixtures import CSV_HEADER, SAMPLE_CSV


VALID_CSV = CSV_HEADER + "\n" + "\n".join([
    "05/28/2020,Nigeria,Western Africa,8344,249,2385,5710",
    "05/27/2020,Nigeria,Western Africa,8068,233,2311,5524",
    "05/28/2020,Kenya,Eastern Africa,1618,58,421,1139",
    '05/27/2020,"Congo (Kinshasa)",Middle Africa,2545,63,359,2123',
])


class TestLoadCases(unittest.TestCase):
    def test_typed_columns(self):
        cases = load_cases(StringIO(VALID_CSV))

        self.assertEqual(list(cases.columns), REQUIRED_COLUMNS)
        self.assertTrue(pd.api.types.is_datetime64_any_dtype(cases[DATE_COL]))
        self.assertIsInstance(cases[REGION_COL].dtype, pd.CategoricalDtype)
        self.assertEqual(list(cases[REGION_COL].cat.categories), Region.labels())
        for col in COUNT_COLUMNS:
            self.assertEqual(cases[col].dtype, "int64")

    def test_ordered_by_date_then_country(self):
        cases = load_cases(StringIO(VALID_CSV))

        self.assertEqual(
            list(zip(cases[DATE_COL].dt.strftime("%Y-%m-%d"), cases[COUNTRY_COL])),
            [
                ("2020-05-27", "Congo (Kinshasa)"),
                ("2020-05-27", "Nigeria"),
                ("2020-05-28", "Kenya"),
                ("2020-05-28", "Nigeria"),
            ],
        )

    def test_active_is_kept_as_reported(self):
        csv = CSV_HEADER + "\n05/28/2020,Kenya,Eastern Africa,100,5,20,60\n"
        cases = load_cases(StringIO(csv))

        self.assertEqual(cases.loc[0, "Active"], 60)

    def test_extra_columns_dropped(self):
        csv = CSV_HEADER + ",Province\n05/28/2020,Kenya,Eastern Africa,1,0,0,1,Nairobi\n"
        cases = load_cases(StringIO(csv))

        self.assertEqual(list(cases.columns), REQUIRED_COLUMNS)

    def test_header_only_gives_empty_table(self):
        cases = load_cases(StringIO(CSV_HEADER + "\n"))

        self.assertTrue(cases.empty)
        self.assertEqual(list(cases.columns), REQUIRED_COLUMNS)

    def test_missing_column(self):
        csv = "ObservationDate,Country,Region,Confirmed,Deaths,Recovered\n05/28/2020,Kenya,Eastern Africa,1,0,0\n"
        with self.assertRaises(ParseError) as ctx:
            load_cases(StringIO(csv))
        self.assertIn("Active", str(ctx.exception))

    def test_non_numeric_count(self):
        csv = CSV_HEADER + "\n05/28/2020,Kenya,Eastern Africa,many,0,0,1\n"
        with self.assertRaises(ParseError) as ctx:
            load_cases(StringIO(csv))
        self.assertIn("Confirmed", str(ctx.exception))

    def test_blank_count(self):
        csv = CSV_HEADER + "\n05/28/2020,Kenya,Eastern Africa,1,,0,1\n"
        with self.assertRaises(ParseError):
            load_cases(StringIO(csv))

    def test_negative_count(self):
        csv = CSV_HEADER + "\n05/28/2020,Kenya,Eastern Africa,1,-1,0,1\n"
        with self.assertRaises(ParseError):
            load_cases(StringIO(csv))

    def test_fractional_count(self):
        csv = CSV_HEADER + "\n05/28/2020,Kenya,Eastern Africa,1.5,0,0,1\n"
        with self.assertRaises(ParseError):
            load_cases(StringIO(csv))

    def test_unknown_region(self):
        csv = CSV_HEADER + "\n05/28/2020,Kenya,East Africa,1,0,0,1\n"
        with self.assertRaises(ParseError) as ctx:
            load_cases(StringIO(csv))
        self.assertIn("East Africa", str(ctx.exception))

    def test_bad_date(self):
        csv = CSV_HEADER + "\n2020-05-28,Kenya,Eastern Africa,1,0,0,1\n"
        with self.assertRaises(ParseError):
            load_cases(StringIO(csv))

    def test_empty_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.csv"
            path.write_text("")
            with self.assertRaises(ParseError):
                load_cases(path)

    def test_wrong_field_count(self):
        csv = CSV_HEADER + "\n05/28/2020,Kenya,Eastern Africa,1,0,0,1\n05/28/2020,Egypt,Northern Africa,1,0,0,1,9\n"
        with self.assertRaises(ParseError) as ctx:
            load_cases(StringIO(csv))
        self.assertIn("Malformed", str(ctx.exception))

    def test_non_utf8_bytes(self):
        csv = CSV_HEADER + "\n05/28/2020,Côte d'Ivoire,Western Africa,1,0,0,1\n"
        with self.assertRaises(ParseError):
            load_cases(BytesIO(csv.encode("latin-1")))

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                load_cases(Path(tmp) / "nope.csv")

    def test_parse_error_is_value_error(self):
        self.assertTrue(issubclass(ParseError, ValueError))

    def test_bundled_sample(self):
        cases = load_cases(SAMPLE_CSV)

        self.assertEqual(len(cases), 112)
        self.assertEqual(cases[COUNTRY_COL].nunique(), 8)
        self.assertEqual(cases[DATE_COL].max(), pd.Timestamp("2020-05-28"))


if __name__ == "__main__":
    unittest.main()
