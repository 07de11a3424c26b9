import json

import pytest
from bdecoding.bencode import decode
from bdecoding.main import main, render, to_json


@pytest.fixture
def torrent_file(tmp_path):
    path = tmp_path / 'sample.torrent'
    path.write_bytes(b'd8:announce9:http://x/4:infod6:lengthi5e6:pieces2:\x00\xffee')
    return path


def test_render_tree():
    value = decode(b'd1:ali1ei2.5ee1:b0:1:cdee')
    assert render(value) == (
        "{\n"
        "  'a': [\n"
        "    1\n"
        "    2.5\n"
        "  ]\n"
        "  'b': b''\n"
        "  'c': {}\n"
        "}"
    )

def test_render_binary_as_hex():
    assert render(decode(b'2:\x00\xff')) == "hex(2 bytes):'00ff'"

def test_to_json():
    value = decode(b'd1:a2:\x00\xff1:bi1.5e1:c3:abce')
    assert to_json(value) == {'a': '00ff', 'b': '1.5', 'c': 'abc'}

def test_main_tree(torrent_file, capsys):
    assert main([str(torrent_file)]) == 0
    out = capsys.readouterr().out
    assert "'announce': b'http://x/'" in out
    assert "'pieces': hex(2 bytes):'00ff'" in out

def test_main_strings(torrent_file, capsys):
    assert main([str(torrent_file), '--strings', '--charset', 'latin-1']) == 0
    out = capsys.readouterr().out
    assert "'announce': 'http://x/'" in out
    assert "'pieces': '\\x00ÿ'" in out

def test_main_json(torrent_file, capsys):
    assert main([str(torrent_file), '--json']) == 0
    decoded = json.loads(capsys.readouterr().out)
    assert decoded == {'announce': 'http://x/', 'info': {'length': 5, 'pieces': '00ff'}}

def test_main_several_values(tmp_path, capsys):
    path = tmp_path / 'values.bin'
    path.write_bytes(b'i1ei2e')
    assert main([str(path)]) == 0
    assert capsys.readouterr().out.split() == ['1', '2']

def test_main_reports_decode_errors(tmp_path, capsys):
    path = tmp_path / 'broken.bin'
    path.write_bytes(b'5:abc')
    assert main([str(path)]) == 1
    assert 'error: Expected 5 bytes, got 3' in capsys.readouterr().err

def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / 'missing.bin')]) == 1
    assert 'error:' in capsys.readouterr().err

def test_main_usage_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2

def test_main_bytes_overrides_configured_strings(torrent_file, capsys, monkeypatch):
    monkeypatch.setattr('bdecoding.config.BENCODE_DECODE_AS_STRING', True)
    assert main([str(torrent_file)]) == 0
    assert "'announce': 'http://x/'" in capsys.readouterr().out

    assert main([str(torrent_file), '--bytes']) == 0
    assert "'announce': b'http://x/'" in capsys.readouterr().out

    assert main([str(torrent_file), '--no-strings']) == 0
    assert "'announce': b'http://x/'" in capsys.readouterr().out

def test_main_strings_and_bytes_are_exclusive(torrent_file, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(torrent_file), '--strings', '--bytes'])
    assert excinfo.value.code == 2

@pytest.mark.parametrize('data', [b'99999999999999999999:abc', b'999999999999999:abc'])
def test_main_huge_string_length(tmp_path, capsys, data):
    path = tmp_path / 'huge.bin'
    path.write_bytes(data)
    assert main([str(path)]) == 1
    assert 'error: Expected' in capsys.readouterr().err

def test_main_deep_nesting(tmp_path, capsys):
    path = tmp_path / 'deep.bin'
    path.write_bytes(b'l' * 5000)
    assert main([str(path)]) == 1
    assert 'error: Nesting deeper than' in capsys.readouterr().err
