"""
Core of Exam Buddy.

Modules:
- background: broker, shared clients, job records and ingestion actors
- ingestion: per-lane loaders, chunking and the ingestion pipeline
- orchestration: queue lanes and job dispatch
- query: retrieval and answer generation
"""
