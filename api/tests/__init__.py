"""
API Tests Module

This module contains comprehensive tests for the API layer functionality.
Tests are organized by domain and functionality.

Available test modules:
- test_unified_session: Comprehensive UnifiedSession and validation testing
"""
