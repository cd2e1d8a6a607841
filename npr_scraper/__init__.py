"""
NPR news scraper.

Runs are:
- full-replace (every run rewrites all NPR rows in one transaction)
- fail-soft per article (one bad article page never kills the run)
"""
