"""Tests for the Family Cleanup integration."""
