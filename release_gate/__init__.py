"""
Release Quality Gate

Gates a deployment pipeline on Azure DevOps test plans, test suites and
work item queries.
"""

__version__ = "1.0.0"
