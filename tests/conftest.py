"""Pytest configuration and shared fixtures for cypar tests.

Every CYPAR_* variable is cleared so the developer's environment cannot
change defaults seen by the tests.
"""

import logging
import os

import pytest


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Auto-use fixture that removes CYPAR_* environment variables for each test."""
    for key in list(os.environ):
        if key.startswith('CYPAR_'):
            monkeypatch.delenv(key, raising=False)

    # setup_logging() sets the package logger level, restore it between tests
    cypar_logger = logging.getLogger('cypar')
    level = cypar_logger.level
    yield
    cypar_logger.setLevel(level)


@pytest.fixture
def spec_dir(tmp_path):
    """A directory tree with Cypress specs mixed with other files.

    \b
    e2e/
        auth/login.cy.js
        auth/logout.cy.js
        cart.cy.js
        checkout.cy.js
        helpers.js
        search.spec.ts
        support/commands.js
    """
    root = tmp_path / 'e2e'
    (root / 'auth').mkdir(parents=True)
    (root / 'support').mkdir()
    for rel in [
        'auth/login.cy.js',
        'auth/logout.cy.js',
        'cart.cy.js',
        'checkout.cy.js',
        'helpers.js',
        'search.spec.ts',
        'support/commands.js',
    ]:
        (root / rel).write_text("describe('x', () => {})\n")
    return root
