from utils.slug import fold_to_ascii, generate_slug, normalize_slug_input


def test_generate_slug_lowercases_and_joins_words_with_underscore():
    assert generate_slug("Summer Season") == "summer_season"
    assert generate_slug("Green   White\tTheme") == "green_white_theme"


def test_generate_slug_drops_punctuation_and_hyphens():
    assert generate_slug("Noel / Christmas!") == "noel__christmas"
    assert generate_slug("dark-mode") == "darkmode"


def test_generate_slug_strips_accented_letters_by_default():
    assert generate_slug("  Mùa Xuân  ") == "ma_xun"


def test_generate_slug_transliterates_when_requested():
    assert generate_slug("  Mùa Xuân  ", transliterate=True) == "mua_xuan"
    assert generate_slug("Tết Đoàn Viên", transliterate=True) == "tet_doan_vien"


def test_generate_slug_empty_input():
    assert generate_slug("") == ""
    assert generate_slug("   ") == ""


def test_normalize_slug_input_keeps_hyphens_and_other_characters():
    assert normalize_slug_input("My Theme-2") == "my_theme-2"
    assert normalize_slug_input("") == ""


def test_fold_to_ascii_handles_letters_without_decomposition():
    assert fold_to_ascii("Đà Lạt") == "Da Lat"
    assert fold_to_ascii("Øresund Łódź") == "Oresund Lodz"
