"""
Testes do importador CSV.
"""

from datetime import datetime

import pytest

from patrimonio.config import ImportOptions
from patrimonio.reports import (
    TabularExporter,
    TabularImporter,
    normalize_key,
    read_records,
    validate_import_row,
)
from patrimonio.reports.exporter import BOM
from patrimonio.reports.headers import ASSETS_BASIC, ASSETS_COMPLETE, FieldKind
from patrimonio.reports.importer import coerce_value, find_missing_headers


class TestParsing:
    """Testes de leitura de registros."""

    def test_simple_record(self):
        assert read_records("a, b ,c") == [(1, ["a", "b", "c"])]

    def test_quoted_fields(self):
        text = '1,"Mesa, grande","diz ""oi""",  x  '
        assert read_records(text) == [(1, ["1", "Mesa, grande", 'diz "oi"', "x"])]

    def test_trailing_empty_field(self):
        assert read_records("a,b,") == [(1, ["a", "b", ""])]

    def test_custom_delimiter(self):
        assert read_records("a;b,c;d", ";") == [(1, ["a", "b,c", "d"])]

    def test_keeps_quoted_newlines(self):
        text = 'A,B\n1,"linha 1\nlinha 2"\n\n2,x\n'
        assert read_records(text) == [
            (1, ["A", "B"]),
            (2, ["1", "linha 1\nlinha 2"]),
            (5, ["2", "x"]),
        ]

    def test_strips_bom_and_crlf(self):
        assert read_records(BOM + "A,B\r\n1,2\r\n") == [(1, ["A", "B"]), (2, ["1", "2"])]

    def test_unquoted_inch_mark_stays_in_its_line(self):
        text = 'A,B\n5" tubo,x\nCano,y\n'
        assert read_records(text) == [
            (1, ["A", "B"]),
            (2, ['5" tubo', "x"]),
            (3, ["Cano", "y"]),
        ]

    @pytest.mark.parametrize("label,expected", [
        ("Descrição", "descricao"),
        ("Localização Atual", "localizacao_atual"),
        ("Data/Hora da Movimentação", "data_hora_da_movimentacao"),
        ("  Código ", "codigo"),
    ])
    def test_normalize_key(self, label, expected):
        assert normalize_key(label) == expected

    def test_find_missing_headers_is_case_insensitive_substring(self):
        parsed = ["código", "Descrição do Bem"]
        assert find_missing_headers(parsed, ["Código", "Descrição", "Categoria"]) == ["Categoria"]


class TestCoercion:
    """Testes de conversão de células."""

    def test_money(self):
        assert coerce_value("R$ 1.234,56", FieldKind.MONEY, "%d/%m/%Y") == 1234.56
        assert coerce_value("10.5", FieldKind.MONEY, "%d/%m/%Y") == 10.5
        assert coerce_value("", FieldKind.MONEY, "%d/%m/%Y") is None

    def test_invalid_money_raises(self):
        with pytest.raises(ValueError):
            coerce_value("abc", FieldKind.MONEY, "%d/%m/%Y")

    def test_date(self):
        assert coerce_value("15/03/2024", FieldKind.DATE, "%d/%m/%Y") == datetime(2024, 3, 15)
        assert coerce_value("2024-03-15T10:00:00", FieldKind.DATE, "%d/%m/%Y") == datetime(2024, 3, 15, 10)

    def test_number_and_bool(self):
        assert coerce_value("3", FieldKind.NUMBER, "%d/%m/%Y") == 3
        assert coerce_value("2,5", FieldKind.NUMBER, "%d/%m/%Y") == 2.5
        assert coerce_value("Sim", FieldKind.BOOL, "%d/%m/%Y") is True
        assert coerce_value("não", FieldKind.BOOL, "%d/%m/%Y") is False

    def test_text_is_kept(self):
        assert coerce_value("", FieldKind.TEXT, "%d/%m/%Y") == ""

    def test_validate_import_row(self):
        assert validate_import_row({"descricao": "Mesa", "categoria": "Móveis"}) == []
        assert validate_import_row({"descricao": " ", "categoria": None, "valor_aquisicao": -1}) == [
            "Descrição é obrigatória",
            "Categoria é obrigatória",
            "Valor de aquisição deve ser um número positivo",
        ]


class TestImport:
    """Testes do fluxo completo de importação."""

    def test_round_trip_complete(self, tmp_path, sample_records):
        csv_text = TabularExporter(tmp_path).to_csv(sample_records, ASSETS_COMPLETE)

        result = TabularImporter(ASSETS_COMPLETE).import_text(csv_text)

        assert result.success
        assert result.total_rows == 3
        assert result.invalid_row_count == 0
        first, second, third = result.rows
        assert first["codigo"] == "20240001"
        assert first["valor_aquisicao"] == 1234.56
        assert first["data_aquisicao"] == datetime(2024, 3, 15)
        assert first["observacoes"] == "Tampo de vidro, pés de metal"
        assert second["status"] == "manutenção"
        assert third["valor_aquisicao"] is None
        assert third["data_aquisicao"] is None

    def test_round_trip_with_escaping(self, tmp_path):
        records = [{
            "codigo": "1",
            "descricao": 'He said "hi", then left\n',
            "categoria": "Teste",
            "status": "Ativo",
        }]
        csv_text = TabularExporter(tmp_path).to_csv(records, ASSETS_BASIC)

        result = TabularImporter(ASSETS_BASIC).import_text(csv_text)

        assert result.valid_row_count == 1
        assert result.rows[0]["descricao"] == 'He said "hi", then left\n'

    def test_missing_required_column_fails_whole_import(self):
        text = "Código,Descrição\n1,Mesa\n"

        result = TabularImporter(ASSETS_BASIC).import_text(text, ["Descrição", "Categoria"])

        assert result.success is False
        assert result.missing_headers == ["Categoria"]
        assert result.error == "Colunas obrigatórias não encontradas: Categoria"
        assert result.rows == []

    def test_empty_file(self):
        result = TabularImporter().import_text("Código,Descrição\n")
        assert result.success is False
        assert result.error == "Arquivo vazio ou sem dados"

    def test_partial_failure_keeps_valid_rows(self):
        lines = [
            "Descrição,Categoria,Valor de Aquisição",
            "Mesa,Móveis,100",
            "Cadeira,Móveis,50",
            "Quadro,Decoração,abc",
            "Vaso,Decoração,20",
            "Lápis,Escritório,1,5",
        ]

        result = TabularImporter(ASSETS_COMPLETE).import_text(
            "\n".join(lines), ["Descrição", "Categoria"]
        )

        assert result.success
        assert result.total_rows == 5
        assert result.valid_row_count == 4
        assert result.invalid_row_count == 1
        assert result.row_errors[0].row_number == 4
        assert "abc" in result.row_errors[0].messages[0]

    def test_row_validation_messages(self):
        text = "Descrição,Categoria\nMesa,\n,Móveis\nCadeira,Móveis\n"

        result = TabularImporter(ASSETS_BASIC).import_text(text, ["Descrição", "Categoria"])

        assert [e.row_number for e in result.row_errors] == [2, 3]
        assert result.row_errors[0].messages == ["Categoria é obrigatória"]
        assert result.row_errors[1].messages == ["Descrição é obrigatória"]
        assert result.rows == [{"descricao": "Cadeira", "categoria": "Móveis"}]

    def test_unknown_columns_use_normalized_key(self):
        text = "Descrição,Categoria,Valor Unitário,Observação Extra\nMesa,Móveis,\"R$ 9,90\",x\n"

        result = TabularImporter(ASSETS_BASIC).import_text(text, ["Descrição"])

        assert result.rows[0]["valor_unitario"] == 9.9
        assert result.rows[0]["observacao_extra"] == "x"

    def test_skip_rows_and_delimiter(self):
        text = "Relatório gerado em 01/01/2024\nDescrição;Categoria\nMesa;Móveis\n"
        importer = TabularImporter(ASSETS_BASIC, ImportOptions(delimiter=";", skip_rows=1))

        result = importer.import_text(text, ["Descrição", "Categoria"])

        assert result.rows == [{"descricao": "Mesa", "categoria": "Móveis"}]

    def test_custom_required_fields(self):
        text = "Tipo,Conteúdo,Unidade\nEscritório,,Caixa\n"
        importer = TabularImporter(required_fields={"conteudo": "Conteúdo é obrigatório"})

        result = importer.import_text(text, ["Tipo", "Conteúdo"])

        assert result.row_errors[0].messages == ["Conteúdo é obrigatório"]

    def test_import_file(self, tmp_path):
        path = tmp_path / "dados.csv"
        path.write_text(BOM + "Descrição,Categoria\r\nMesa,Móveis\r\n", encoding="utf-8")

        result = TabularImporter(ASSETS_BASIC).import_file(path, ["Descrição", "Categoria"])

        assert result.valid_row_count == 1

    def test_import_missing_file(self, tmp_path):
        result = TabularImporter().import_file(tmp_path / "nao_existe.csv")
        assert result.success is False
        assert result.error.startswith("Erro ao ler arquivo")
