# src/tddguard/cli/__init__.py
