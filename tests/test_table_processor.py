import os
import stat

import pytest
from rmd_to_latex.exceptions import InputNotFoundError, MalformedTableMarkupError, WriteFailureError
from rmd_to_latex.post_processing.table_processor import TableProcessor, rewrite_tables

LONGTABLE = "\n".join([
    r"\begin{longtable}[]{lr}",
    r"\toprule",
    r"Name & Value\tabularnewline",
    r"\midrule",
    r"\endhead",
    r"Alice & 1\tabularnewline",
    r"Bob & 2\tabularnewline",
    r"\bottomrule",
    r"\end{longtable}",
])

TABLEDATA = "\n".join([
    r"\begin{tabledata}{lr}",
    r"\header Name & Value\\",
    r"\row Alice & 1\\",
    r"\row Bob & 2\\",
    r"\end{tabledata}",
])

SECOND_LONGTABLE = "\n".join([
    r"\begin{longtable}[]{c}",
    r"\toprule",
    r"Id\tabularnewline",
    r"\endhead",
    r"7\tabularnewline",
    r"\bottomrule",
    r"\end{longtable}",
])

SECOND_TABLEDATA = "\n".join([
    r"\begin{tabledata}{c}",
    r"\header Id\\",
    r"\row 7\\",
    r"\end{tabledata}",
])

def test_tableless_document_unchanged():
    processor = TableProcessor()
    text = "\\documentclass{article}\n\n\\begin{document}\nHello\n\\end{document}\n"
    assert processor.process_text(text) == text
    assert processor.process_text(text.rstrip("\n")) == text.rstrip("\n")
    assert processor.stats.table_count == 0

def test_single_table():
    processor = TableProcessor()
    assert processor.process_text(LONGTABLE + "\n") == TABLEDATA + "\n"
    assert processor.stats.table_count == 1
    assert processor.stats.row_count == 2

def test_multiple_tables_keep_surrounding_content():
    text = "\n".join([
        "\\section{Results}",
        "Before  the tables.",
        LONGTABLE,
        "",
        "Middle paragraph with trailing space ",
        SECOND_LONGTABLE,
        "After.",
    ]) + "\n"
    expected = "\n".join([
        "\\section{Results}",
        "Before  the tables.",
        TABLEDATA,
        "",
        "Middle paragraph with trailing space ",
        SECOND_TABLEDATA,
        "After.",
    ]) + "\n"

    processor = TableProcessor()
    result = processor.process_text(text)
    assert result == expected
    assert "longtable" not in result
    assert result.count(r"\begin{tabledata}") == 2
    assert result.count(r"\end{tabledata}") == 2
    assert processor.stats.table_count == 2
    assert processor.stats.row_count == 3

def test_process_lines_returns_one_entry_per_block():
    lines = ["a"] + LONGTABLE.split("\n") + ["b"]
    result = TableProcessor().process_lines(lines)
    assert result == ["a", TABLEDATA, "b"]
    # Input list is not modified
    assert lines[1] == r"\begin{longtable}[]{lr}"

def test_rewrite_tables_file(tmp_path):
    source = tmp_path / "paper.tmp.tex"
    source.write_text("Intro\n" + LONGTABLE + "\nEnd\n", encoding="utf-8")
    output = tmp_path / "out" / "paper.tex"

    lines = rewrite_tables(source, output)

    assert output.read_text(encoding="utf-8") == "Intro\n" + TABLEDATA + "\nEnd\n"
    assert lines == ["Intro", TABLEDATA, "End"]
    # No temporary files left behind
    assert [p.name for p in output.parent.iterdir()] == ["paper.tex"]

def test_missing_input(tmp_path):
    with pytest.raises(InputNotFoundError):
        rewrite_tables(tmp_path / "missing.tex", tmp_path / "out.tex")

def test_malformed_input_writes_nothing(tmp_path):
    source = tmp_path / "bad.tex"
    source.write_text(LONGTABLE + "\n" + r"\begin{longtable}[]{l}" + "\n", encoding="utf-8")
    output = tmp_path / "bad_out.tex"

    with pytest.raises(MalformedTableMarkupError):
        rewrite_tables(source, output)
    assert not output.exists()

def test_unwritable_destination(tmp_path):
    source = tmp_path / "paper.tex"
    source.write_text(LONGTABLE, encoding="utf-8")
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(WriteFailureError):
        rewrite_tables(source, blocker / "paper.tex")

def test_multiline_column_spec_kept_whole():
    text = "\n".join([
        r"\begin{longtable}[]{@{}",
        r"  >{\raggedright\arraybackslash}p{(\columnwidth - 2\tabcolsep) * \real{0.60}}",
        r"  >{\raggedleft\arraybackslash}p{(\columnwidth - 2\tabcolsep) * \real{0.40}}@{}}",
        r"\toprule",
        r"Name & Value\tabularnewline",
        r"\midrule",
        r"\endhead",
        r"Alice & 1\tabularnewline",
        r"\bottomrule",
        r"\end{longtable}",
    ]) + "\n"
    expected = "\n".join([
        r"\begin{tabledata}{@{}",
        r"  >{\raggedright\arraybackslash}p{(\columnwidth - 2\tabcolsep) * \real{0.60}}",
        r"  >{\raggedleft\arraybackslash}p{(\columnwidth - 2\tabcolsep) * \real{0.40}}@{}}",
        r"\header Name & Value\\",
        r"\row Alice & 1\\",
        r"\end{tabledata}",
    ]) + "\n"
    assert TableProcessor().process_text(text) == expected

def test_crlf_tableless_file_unchanged(tmp_path):
    source = tmp_path / "in.tex"
    source.write_bytes(b"\\section{A}\r\ntext\r\n")
    output = tmp_path / "out.tex"

    rewrite_tables(source, output)

    assert output.read_bytes() == b"\\section{A}\r\ntext\r\n"

def test_crlf_line_endings_kept_around_tables(tmp_path):
    source = tmp_path / "in.tex"
    source.write_bytes(("Intro\n" + LONGTABLE + "\nEnd\n").replace("\n", "\r\n").encode("utf-8"))
    output = tmp_path / "out.tex"

    rewrite_tables(source, output)

    expected = ("Intro\n" + TABLEDATA + "\nEnd\n").replace("\n", "\r\n").encode("utf-8")
    assert output.read_bytes() == expected

@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_output_uses_default_file_mode(tmp_path):
    source = tmp_path / "in.tex"
    source.write_text(LONGTABLE, encoding="utf-8")
    output = tmp_path / "out.tex"

    umask = os.umask(0)
    os.umask(umask)
    rewrite_tables(source, output)

    assert stat.S_IMODE(output.stat().st_mode) == 0o666 & ~umask

@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_output_keeps_existing_file_mode(tmp_path):
    source = tmp_path / "in.tex"
    source.write_text(LONGTABLE, encoding="utf-8")
    output = tmp_path / "out.tex"
    output.write_text("old", encoding="utf-8")
    os.chmod(output, 0o640)

    rewrite_tables(source, output)

    assert stat.S_IMODE(output.stat().st_mode) == 0o640
