"""nox build configuration for the Plex operator."""

import nox

# Default sessions
nox.options.sessions = ["lint", "typing", "test", "coverage-report"]

# Other nox defaults
nox.options.reuse_existing_virtualenvs = True


@nox.session(name="coverage-report", requires=["test"])
def coverage_report(session: nox.Session) -> None:
    """Generate a code coverage report from the test suite."""
    session.install("-e", ".[test]")
    session.run("coverage", "report", *session.posargs)


@nox.session
def lint(session: nox.Session) -> None:
    """Run pre-commit hooks."""
    session.install("-e", ".[lint]")
    session.run("pre-commit", "run", "--all-files", *session.posargs)


@nox.session
def test(session: nox.Session) -> None:
    """Run tests."""
    session.install("-e", ".[test]")
    session.run(
        "pytest",
        "--cov=plexoperator",
        "--cov-branch",
        "--cov-report=",
        *session.posargs,
    )


@nox.session
def typing(session: nox.Session) -> None:
    """Run mypy."""
    session.install("-e", ".[test,typing]")
    session.run(
        "mypy",
        *session.posargs,
        "--namespace-packages",
        "--explicit-package-bases",
        "noxfile.py",
        "src",
        "tests",
    )
