"""Shared fixtures for capital maximization tests."""

from decimal import Decimal

import pytest

from capital_allocate.models import OptimizationQuery, Project


@pytest.fixture()
def sequential_projects():
    """Projects that become affordable one after another."""
    return [
        Project("Project A", Decimal("0"), Decimal("1")),
        Project("Project B", Decimal("1"), Decimal("2")),
        Project("Project C", Decimal("1"), Decimal("3")),
    ]


@pytest.fixture()
def unaffordable_projects():
    """Projects that no zero-capital run can start."""
    return [
        Project("Project X", Decimal("10"), Decimal("5")),
        Project("Project Y", Decimal("20"), Decimal("10")),
    ]


@pytest.fixture()
def sample_projects():
    """Mixed catalog where the greedy order differs from input order."""
    return [
        Project("Refinery", Decimal("12"), Decimal("9")),
        Project("Bakery", Decimal("0"), Decimal("2")),
        Project("Kiosk", Decimal("1"), Decimal("1")),
        Project("Workshop", Decimal("2"), Decimal("4")),
        Project("Warehouse", Decimal("6"), Decimal("6")),
        Project("Orchard", Decimal("3"), Decimal("3")),
    ]


@pytest.fixture()
def sample_query(sample_projects):
    return OptimizationQuery(sample_projects, 4, Decimal("0"))


@pytest.fixture()
def sample_event():
    """Orchestrator-shaped event with wire field names."""
    return {
        "projects": [
            {"id": "p-1", "name": "Project A", "requiredCapital": "0", "profit": "1", "version": 0},
            {"id": "p-2", "name": "Project B", "requiredCapital": "1", "profit": "2", "version": 0},
            {"id": "p-3", "name": "Project C", "requiredCapital": "1", "profit": "3", "version": 0},
        ],
        "max_projects": 2,
        "initial_capital": "0",
    }
