"""
Adaptive Practice Engine.

Decides which practice questions a learner sees next, adapts per-skill
difficulty over time and scores how confidently each answer was given.

Packages:
- core: shared models, decay model, errors
- selection: classifier, distribution planner, candidate selector, service
- adaptive: continuous and drill difficulty adaptation, attempt write-back
- scoring: confidence scorer
- stores: collaborator interfaces plus in-memory and SQL implementations
- cli: `practice` command line
"""

__version__ = "1.0.0"
