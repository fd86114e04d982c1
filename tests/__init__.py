"""Tests for hive-orchestrator."""
