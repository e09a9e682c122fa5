"""Session log archive: write-once markdown summaries + resume-time retrieval.

Layout:
    {project_root}/
    ├── CLAUDE.md                                  # Project memory (read-only here)
    └── CC-Session-Logs/
        ├── 16-01-2026-18_05-fix-auth-token-refresh.md
        └── 16-01-2026-18_05-fix-auth-token-refresh-2.md   # Same-minute collision

Each log is a summary region followed by a ``## Raw Session Log`` section
holding the verbatim transcript. Listing and search read only the summary;
the raw region is loaded on demand. The project root is discovered via
`resolve_project_root()`.
"""
