"""
Actas Soporte Técnico MoDo — equipment custody acknowledgments

Packages:
    api/     Flask blueprint, page templates and JSON endpoints
    forms/   Acta kinds, validation, form sessions, rendering and PDF export
    core/    Shared configuration, logging, and paths
"""
