#!/usr/bin/env python3
"""
Main test runner for the Mirrow front end tests.
"""

import sys
import os
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)


def run_smoke_test() -> bool:
    """Scan, parse and print a small program end to end."""
    from mirrow import parse_source, format_program

    code = """
    import "std/list"

    func total(items) {
        items |> sum
    }

    enum Access { All, Limited { scopes } }

    let! user = load("ada")
    match user.role {
        "admin" | "owner" -> {
            log($"granting ${user.name}")
            Access::All
        },
        _ -> Access::Limited { scopes = [user.team] },
    }
    """

    print("Testing scan -> parse -> print pipeline...")
    result = parse_source(code, "smoke.mw")
    if not result.success:
        for error in result.errors:
            print(f"  ❌ {error.report()}")
        return False

    print(f"  ✅ Parsed {len(result.program)} top-level statements")
    print("-" * 40)
    print(format_program(result.program))
    print("-" * 40)
    print()
    return True


def run_all_tests() -> bool:
    """Run all Mirrow front end tests."""

    print("🚀 Mirrow Front End Test Suite")
    print("=" * 60)

    if not run_smoke_test():
        return False

    suite = unittest.defaultTestLoader.discover(os.path.join(project_root, "tests"))
    result = unittest.TextTestRunner(verbosity=2).run(suite)

    print()
    if result.wasSuccessful():
        print("🎉 All tests PASSED!")
    else:
        print(f"❌ {len(result.failures)} failure(s), {len(result.errors)} error(s)")
    return result.wasSuccessful()


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
