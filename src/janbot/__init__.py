"""
Janbot: conversational assistant core for the AML case-management dashboard.

- llm: model table and vendor routing
- tools: data and import tools the model can call
- billing: token usage metering
"""

__version__ = "0.1.0"
