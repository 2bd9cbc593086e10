from config import Config


def test_accepts_pdf_within_limit() -> None:
    assert Config.validate_file("statement.PDF", 2048) == (True, None)


def test_rejects_missing_name() -> None:
    assert Config.validate_file("", 10) == (False, "No file uploaded")


def test_rejects_oversized_files_before_type() -> None:
    is_valid, error = Config.validate_file("huge.csv", Config.MAX_FILE_SIZE_BYTES + 1)

    assert is_valid is False
    assert error.startswith("File too large")


def test_rejects_non_pdf_and_empty_files() -> None:
    assert Config.validate_file("statement.csv", 10)[1].startswith("Only PDF files")
    assert Config.validate_file("statement.pdf", 0) == (False, "File is empty")


def test_output_paths_create_directories(output_dirs) -> None:
    path = Config.get_output_path("report.pdf")

    assert path == output_dirs / "output" / "report.pdf"
    assert path.parent.is_dir()
    assert Config.get_log_path("run.log").parent.is_dir()
