"""
Centralized test suite for the marketplace dashboards.

Test Organization:
- integration/ - end-to-end flows (JWT login, management commands)
- App-specific tests remain in their respective app directories (e.g., dashboards/test_stats_service.py)
"""
