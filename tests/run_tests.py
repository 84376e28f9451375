"""
Test runner script for the report builder test suite.
Provides easy commands to run different test categories, coverage reports and code checks.
"""

import subprocess
import sys
import os
from pathlib import Path

def run_command(command, description):
    """Run a command and handle output"""
    print(f"\n{'='*60}")
    print(f"Running: {description}")
    print(f"Command: {command}")
    print(f"{'='*60}")
    
    result = subprocess.run(command, shell=True, capture_output=True, text=True)
    
    if result.stdout:
        print(result.stdout)
    if result.stderr:
        print("STDERR:", result.stderr)
    
    return result.returncode == 0

COMMANDS = {
    "all": ("python -m pytest tests/ -v", "Running all tests"),
    "unit": ("python -m pytest tests/unit/ -v", "Running unit tests"),
    "functional": ("python -m pytest tests/functional/ -v", "Running functional tests"),
    "pivot": ("python -m pytest tests/ -k 'pivot or totals or export' -v", "Running pivot engine tests"),
    "conditions": ("python -m pytest tests/ -k 'condition or codec' -v", "Running condition tests"),
    "coverage": (
        "python -m pytest tests/ --cov=report_builder --cov-report=html --cov-report=term-missing -v",
        "Running tests with coverage report",
    ),
    "lint": ("black --check report_builder tests", "Checking formatting with black"),
    "typecheck": ("mypy report_builder", "Running mypy type checking"),
    "install": ('pip install -e ".[test,dev]"', "Installing test dependencies"),
}

def main():
    """Main test runner"""
    # Change to project root directory
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)
    
    if len(sys.argv) < 2:
        print("Usage: python tests/run_tests.py [command]")
        print("\nAvailable commands:")
        print("  all          - Run all tests")
        print("  unit         - Run unit tests only") 
        print("  functional   - Run functional tests only")
        print("  pivot        - Run pivot engine, totals and export tests only")
        print("  conditions   - Run condition and codec tests only")
        print("  coverage     - Run tests with coverage report")
        print("  lint         - Check formatting with black")
        print("  typecheck    - Run mypy on the package")
        print("  install      - Install test dependencies")
        sys.exit(1)
    
    command = sys.argv[1].lower()
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        sys.exit(1)

    success = run_command(*COMMANDS[command])
    if command == "coverage" and success:
        print("\n📊 Coverage report generated in htmlcov/index.html")
    
    if success:
        print("\n✅ Completed successfully!")
    else:
        print("\n❌ Some checks failed!")
        sys.exit(1)

if __name__ == "__main__":
    main()
