"""Shared test doubles and catalog builders."""
