"""
Symposium - multi-consultant chat service.

Packages are organized by responsibility:
- api/          : FastAPI application and routes
- core/         : Configuration, logging, errors, audit
- consultants/  : Consultant strategies, pipeline and factory
- datasources/  : Airtable and Perplexity adapters, filter formulas
- database/     : SQLAlchemy models and session management
- llm/          : OpenRouter gateway client and prompts
- models/       : Pydantic request/response schemas
- services/     : Chat turns, symposiums, knowledge base, table queries
"""
__version__ = "0.3.0"
