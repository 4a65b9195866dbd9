# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Test suite for AssocAlchemy.

- Unit tests for the shared scaffolding (guards, foreign key synthesis,
  accessor installation, model resolution, construction pipeline)
- End-to-end tests for each association kind
"""
