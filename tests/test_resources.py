import zipfile
from pathlib import Path
from rmd_to_latex.processing.archive import archive_path_for, make_archive
from rmd_to_latex.processing.resources import copy_resources, copy_tree, find_external_resources

RMD = """---
title: "An example workflow"
bibliography: [refs.bib, extra.bib]
csl: style.csl
---

# Introduction

![A local figure](figs/overview.png)
![A remote figure](https://example.org/remote.png)
![Missing](figs/missing.png)

```{r}
knitr::include_graphics("figs/diagram.pdf")
```

\\includegraphics[width=0.5\\textwidth]{figs/overview.png}
"""

def _make_project(root: Path) -> Path:
    (root / "figs").mkdir()
    for name in ("refs.bib", "extra.bib", "style.csl", "figs/overview.png", "figs/diagram.pdf"):
        (root / name).write_text("x", encoding="utf-8")
    rmd = root / "article.Rmd"
    rmd.write_text(RMD, encoding="utf-8")
    return rmd

def test_find_external_resources(tmp_path):
    rmd = _make_project(tmp_path)
    assert find_external_resources(rmd) == [
        Path("refs.bib"),
        Path("extra.bib"),
        Path("style.csl"),
        Path("figs/overview.png"),
        Path("figs/diagram.pdf"),
    ]

def test_block_list_bibliography(tmp_path):
    (tmp_path / "a.bib").write_text("x", encoding="utf-8")
    (tmp_path / "b.bib").write_text("x", encoding="utf-8")
    rmd = tmp_path / "doc.Rmd"
    rmd.write_text("---\nbibliography:\n  - a.bib\n  - 'b.bib'\ntitle: T\n---\nText\n", encoding="utf-8")
    assert find_external_resources(rmd) == [Path("a.bib"), Path("b.bib")]

def test_no_resources(tmp_path):
    rmd = tmp_path / "plain.Rmd"
    rmd.write_text("Just text\n", encoding="utf-8")
    assert find_external_resources(rmd) == []

def test_copy_resources_keeps_layout(tmp_path):
    project = tmp_path / "project"
    project.mkdir()
    rmd = _make_project(project)
    dest = tmp_path / "dest"
    dest.mkdir()

    copied = copy_resources(rmd, dest)

    assert dest / "figs" / "overview.png" in copied
    assert (dest / "figs" / "diagram.pdf").is_file()
    assert (dest / "refs.bib").is_file()

def test_copy_tree_merges(tmp_path):
    figure = tmp_path / "work" / "figure"
    figure.mkdir(parents=True)
    (figure / "plot-1.pdf").write_text("p", encoding="utf-8")
    dest = tmp_path / "out"
    (dest / "figure").mkdir(parents=True)
    (dest / "figure" / "old.pdf").write_text("o", encoding="utf-8")

    target = copy_tree(figure, dest)

    assert target == dest / "figure"
    assert sorted(p.name for p in target.iterdir()) == ["old.pdf", "plot-1.pdf"]

def test_make_archive(tmp_path):
    output = tmp_path / "submission"
    (output / "figure").mkdir(parents=True)
    (output / "article.tex").write_text("tex", encoding="utf-8")
    (output / "figure" / "plot-1.pdf").write_text("pdf", encoding="utf-8")

    zip_path = make_archive(output)

    assert zip_path == tmp_path / "submission.zip"
    assert archive_path_for(str(output) + "/") == zip_path
    with zipfile.ZipFile(zip_path) as zf:
        assert sorted(zf.namelist()) == ["submission/article.tex", "submission/figure/plot-1.pdf"]
