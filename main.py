"""
Interactive Finance Lessons - Demo Runner
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from finlessons.core.session import LessonSession
from finlessons.lessons import build_default_registry


def header(t):
    print(f"\n{'='*70}\n  {t}\n{'='*70}")


def show_value(name, value):
    if isinstance(value, float):
        print(f"    {name:28s}: {value:>14.4f}")
    else:
        print(f"    {name:28s}: {value!s:>14}")


def main():
    header("INTERACTIVE FINANCE LESSONS - COMPUTATION CORE")
    registry = build_default_registry()

    # --- Registry statistics ---
    header("1. REGISTRY")
    stats = registry.stats()
    print(f"\n  Lessons:          {stats.total_modules}")
    print(f"  Phases:           {stats.total_phases}")
    print(f"  Parameters:       {stats.total_parameters}")
    print(f"  Avg phases:       {stats.average_phases}")
    print(f"  Avg parameters:   {stats.average_parameters}")
    print("\n  By difficulty:")
    for level, count in stats.by_difficulty.items():
        print(f"    {level:15s}: {count}")

    report = registry.validate_all()
    print(f"\n  Valid: {len(report.valid)}  Invalid: {len(report.invalid)}  "
          f"With warnings: {len(report.warnings)}")

    # --- Default calculations per lesson ---
    for i, module in enumerate(registry.get_all(sort_by="difficulty"), start=2):
        header(f"{i}. {module.title.upper()}")
        session = LessonSession(module)
        for name, value in session.calculations.items():
            show_value(name, value)
        print(f"\n  Domain check: {'OK' if session.is_valid else 'FAILED'}")
        for name, frame in session.chart_data.items():
            print(f"    series {name:26s}: {len(frame):>5d} rows x {frame.shape[1]} cols")

    # --- Search ---
    header(f"{len(registry) + 2}. SEARCH 'risk'")
    for module in registry.search("risk"):
        print(f"    {module.id:25s} {module.short_title}")

    header("DEMO COMPLETE")

if __name__ == "__main__":
    main()
