# src/pricing/batch.py
"""
Batch premium estimation and rate sheets.

Prices a table of requests in one pass with the same multiplier chain and
rounding as src.pricing.estimate.estimate, so a row here always matches the
single-request result for the same inputs.

Input columns:
  category, gender, age, coverage_unit, term_years, is_smoker

Outputs:
1) Priced requests (input columns + base_price + monthly_premium)
2) Summary report JSON
3) Optional rate sheet: premium by age (rows) x category (columns)

Usage:
  python -m src.pricing.batch --in_path data/requests.csv
  python -m src.pricing.batch --in_path data/requests.csv --rate_sheet --rate_sheet_gender female
  python -m src.pricing.batch --in_path data/requests.parquet --upload
"""

from __future__ import annotations

import argparse
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from src.pricing.config import MAX_AGE, MIN_AGE, Category, EstimatorConfig, Gender
from src.utils.coerce import to_flag
from src.utils.config import get_aws_config, get_paths
from src.utils.io import ensure_dir, read_df, s3_upload_file, write_df, write_json

REQUIRED_COLUMNS = ["category", "gender", "age", "coverage_unit", "term_years", "is_smoker"]


@dataclass
class BatchReport:
    rows: int
    currency: str
    mean_premium: float
    min_premium: int
    max_premium: int
    mean_premium_by_category: Dict[str, float]
    unknown_categories: List[str]


def _validate_columns(df: pd.DataFrame) -> None:
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def _validate_rows(age: pd.Series, coverage: pd.Series) -> None:
    """
    Same bounds as the calculator form: 0 <= age <= 100, coverage_unit > 0.
    Blank or non-numeric values count as invalid.
    """
    bad_age = age.isna() | (age < MIN_AGE) | (age > MAX_AGE)
    if bad_age.any():
        rows = age.index[bad_age].tolist()[:10]
        raise ValueError(f"age must be between {MIN_AGE} and {MAX_AGE}. Invalid rows: {rows}")

    bad_coverage = coverage.isna() | (coverage <= 0)
    if bad_coverage.any():
        rows = coverage.index[bad_coverage].tolist()[:10]
        raise ValueError(f"coverage_unit must be greater than 0. Invalid rows: {rows}")


def _normalise_gender(s: pd.Series) -> pd.Series:
    return s.astype("string").str.strip().str.lower()


def _normalise_term(s: pd.Series) -> pd.Series:
    """
    "20", 20 and 20.0 all become "20".
    """
    text = s.astype("string").str.strip()
    return text.str.replace(r"\.0+$", "", regex=True)


def _age_multipliers(age: np.ndarray, cfg: EstimatorConfig) -> np.ndarray:
    conditions = [age < upper for upper, _ in cfg.age_brackets]
    choices = [mult for _, mult in cfg.age_brackets]
    return np.select(conditions, choices, default=cfg.oldest_multiplier)


def estimate_frame(df: pd.DataFrame, cfg: Optional[EstimatorConfig] = None) -> pd.DataFrame:
    """
    Price every row of df. Returns a copy with base_price and monthly_premium added.
    """
    cfg = cfg or EstimatorConfig()
    _validate_columns(df)

    out = df.copy()

    gender = _normalise_gender(out["gender"])
    term = _normalise_term(out["term_years"])
    smoker = out["is_smoker"].astype(object).map(lambda v: False if pd.isna(v) else bool(to_flag(v)))
    smoker = smoker.to_numpy(dtype=bool)

    base = out["category"].astype(object).map(cfg.base_prices).fillna(cfg.default_base_price)
    base = base.to_numpy(dtype=float)
    age_s = pd.to_numeric(out["age"], errors="coerce")
    coverage_s = pd.to_numeric(out["coverage_unit"], errors="coerce")
    _validate_rows(age_s, coverage_s)
    age = age_s.to_numpy(dtype=float)
    coverage = coverage_s.to_numpy(dtype=float)

    age_m = _age_multipliers(age, cfg)
    is_female = (gender == Gender.FEMALE.value).fillna(False).to_numpy(dtype=bool)
    gender_m = np.where(is_female, cfg.female_multiplier, 1.0)
    adjusted_base = base * age_m * gender_m

    coverage_m = coverage / cfg.reference_coverage
    term_m = term.astype(object).map(cfg.term_multipliers).fillna(cfg.default_term_multiplier).to_numpy(dtype=float)
    smoker_m = np.where(smoker, cfg.smoker_multiplier, 1.0)

    raw = adjusted_base * coverage_m * term_m * smoker_m
    premium = np.floor(raw / cfg.rounding_unit + 0.5) * cfg.rounding_unit

    out["base_price"] = base
    out["monthly_premium"] = premium.astype("int64")
    return out


def rate_sheet(
    cfg: Optional[EstimatorConfig] = None,
    *,
    gender: str = Gender.MALE.value,
    term_years: str = "20",
    coverage_unit: int = 5000,
    is_smoker: bool = False,
    ages: Iterable[int] = range(0, 101),
) -> pd.DataFrame:
    """
    Premium table for one profile: one row per age, one column per known category.
    """
    cfg = cfg or EstimatorConfig()
    ages = list(ages)
    categories = [c.value for c in Category]

    grid = pd.DataFrame(
        [
            {
                "category": cat,
                "gender": gender,
                "age": age,
                "coverage_unit": coverage_unit,
                "term_years": term_years,
                "is_smoker": is_smoker,
            }
            for cat in categories
            for age in ages
        ]
    )
    priced = estimate_frame(grid, cfg)

    sheet = priced.pivot(index="age", columns="category", values="monthly_premium")
    return sheet.reindex(columns=categories)


def summarise(priced: pd.DataFrame, cfg: Optional[EstimatorConfig] = None) -> BatchReport:
    cfg = cfg or EstimatorConfig()
    premiums = priced["monthly_premium"]

    by_cat = priced.groupby("category")["monthly_premium"].mean()
    unknown = sorted({str(c) for c in priced["category"].dropna().unique() if c not in cfg.base_prices})

    return BatchReport(
        rows=int(len(priced)),
        currency=cfg.currency,
        mean_premium=float(premiums.mean()) if len(priced) else 0.0,
        min_premium=int(premiums.min()) if len(priced) else 0,
        max_premium=int(premiums.max()) if len(priced) else 0,
        mean_premium_by_category={str(k): float(v) for k, v in by_cat.items()},
        unknown_categories=unknown,
    )


def _resolve(path: str, root: Path) -> Path:
    """Relative CLI paths are taken from the repo root, absolute ones as given."""
    p = Path(path)
    return p if p.is_absolute() else root / p


def _rate_sheet_name(gender: str, term_years: str, coverage_unit: int, is_smoker: bool) -> str:
    smoker = "_smoker" if is_smoker else ""
    return f"{gender}_{term_years}y_{coverage_unit}{smoker}.csv"


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Estimate monthly premiums for a file of requests.")
    p.add_argument(
        "--in_path",
        type=str,
        required=True,
        help="Requests file (.csv or .parquet). Relative paths resolve from the repo root.",
    )
    p.add_argument(
        "--out_path",
        type=str,
        default=None,
        help="Output path for priced requests (default: reports/estimates.csv).",
    )
    p.add_argument(
        "--report_path",
        type=str,
        default=None,
        help="Output path for summary report JSON (default: reports/estimate_summary.json).",
    )
    p.add_argument("--rate_sheet", action="store_true", help="Also write a premium-by-age rate sheet.")
    p.add_argument(
        "--rate_sheet_path",
        type=str,
        default=None,
        help="Rate sheet output path (default: reports/rate_sheets/<gender>_<term>y_<coverage>.csv). Implies --rate_sheet.",
    )
    p.add_argument("--rate_sheet_gender", type=str, default=Gender.MALE.value)
    p.add_argument("--rate_sheet_term", type=str, default="20")
    p.add_argument("--rate_sheet_coverage", type=int, default=5000)
    p.add_argument("--rate_sheet_smoker", action="store_true")
    p.add_argument("--upload", action="store_true", help="Upload outputs to S3 (requires S3_BUCKET).")
    return p.parse_args()


def main() -> None:
    args = parse_args()
    paths = get_paths()
    cfg = EstimatorConfig()

    in_path = _resolve(args.in_path, paths.root)
    out_path = _resolve(args.out_path, paths.root) if args.out_path else paths.reports_dir / "estimates.csv"
    report_path = (
        _resolve(args.report_path, paths.root) if args.report_path else paths.reports_dir / "estimate_summary.json"
    )
    ensure_dir(out_path.parent)
    ensure_dir(report_path.parent)

    df = read_df(in_path)
    priced = estimate_frame(df, cfg)
    report = summarise(priced, cfg)

    write_df(priced, out_path)
    write_json(asdict(report), report_path)
    outputs = [out_path, report_path]

    print(f"[OK] Estimates saved : {out_path}")
    print(f"[OK] Report saved    : {report_path}")

    if args.rate_sheet or args.rate_sheet_path:
        if args.rate_sheet_path:
            sheet_path = _resolve(args.rate_sheet_path, paths.root)
        else:
            name = _rate_sheet_name(
                args.rate_sheet_gender, args.rate_sheet_term, args.rate_sheet_coverage, args.rate_sheet_smoker
            )
            sheet_path = paths.rate_sheets_dir / name
        sheet = rate_sheet(
            cfg,
            gender=args.rate_sheet_gender,
            term_years=args.rate_sheet_term,
            coverage_unit=args.rate_sheet_coverage,
            is_smoker=args.rate_sheet_smoker,
        )
        write_df(sheet.reset_index(), sheet_path)
        outputs.append(sheet_path)
        print(f"[OK] Rate sheet saved: {sheet_path}")

    print(
        f"Rows: {report.rows} | Mean={report.mean_premium:,.0f} {report.currency} "
        f"| Min={report.min_premium:,} | Max={report.max_premium:,}"
    )
    if report.unknown_categories:
        print(f"Unknown categories priced at default base: {report.unknown_categories}")

    if args.upload:
        aws = get_aws_config()
        if not aws.enabled:
            raise ValueError("--upload requires S3_BUCKET to be set.")
        for path in outputs:
            key = f"{aws.s3_prefix}/{path.name}"
            uri = s3_upload_file(path, aws.s3_bucket, key, region=aws.region)
            print(f"[OK] Uploaded        : {uri}")


if __name__ == "__main__":
    main()
