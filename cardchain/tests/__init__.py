"""Tests for the cardchain engine."""
