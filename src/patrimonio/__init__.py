"""
patrimonio - Controle de estoque e patrimônio da clínica.

Validação de formulários, exportação e importação de relatórios
(CSV, JSON, Excel) e persistência local em SQLite.
"""

__version__ = "0.1.0"
