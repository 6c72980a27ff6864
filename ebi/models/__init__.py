"""Data models: scripts, analysis results, extracted components and reports."""