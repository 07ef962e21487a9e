import io

import pytest

from yamdc import nfo
from yamdc.nfo import Actor, Art, Movie, ScrapeInfo


def _sample_movie():
    return Movie(
        plot="hello world, this is a test",
        date_added="2022-01-02",
        title="hello world",
        original_title="hello world",
        sort_title="hello world",
        set_name="aaaa",
        rating=111,
        release="2021-01-05",
        release_date="2021-01-05",
        premiered="2021-01-05",
        runtime=60,
        year=2021,
        tags=["t_a", "t_b", "t_c", "t_d"],
        studio="hello_studio",
        maker="hello_maker",
        genres=["t_x", "t_y", "t_z"],
        art=Art(poster="art_poster.jpg", fanart=["art_fanart_1", "art_fanart_2", "art_fanart_3"]),
        mpaa="JP-18+",
        director="hello_director",
        actors=[Actor(name="act_a", role="main", thumb="act_a.jpg")],
        poster="poster.jpg",
        thumb="thumb.jpg",
        label="hello_label",
        id="2022-01111",
        cover="cover.jpg",
        fanart="fanart.jpg",
        scrape_info=ScrapeInfo(source="abc", date="2021-03-05"),
    )


def test_read_write():
    movie = _sample_movie()
    buf = io.BytesIO()
    nfo.write_movie(buf, movie)
    assert nfo.parse_movie_with_data(buf.getvalue()) == movie


def test_output_has_header_and_formatted_numbers():
    buf = io.BytesIO()
    nfo.write_movie(buf, _sample_movie())
    data = buf.getvalue()
    assert data.startswith(b'<?xml version="1.0" encoding="UTF-8"?>\n<movie>')
    assert b"<rating>111</rating>" in data
    assert b"<runtime>60</runtime>" in data


def test_empty_fields_are_omitted_but_structs_kept():
    buf = io.BytesIO()
    nfo.write_movie(buf, Movie())
    data = buf.getvalue()
    assert b"<plot>" not in data
    assert b"<rating>" not in data
    assert b"<art></art>" in data
    assert b"<source></source>" in data
    assert nfo.parse_movie_with_data(data) == Movie()


def test_file_round_trip(tmp_path):
    movie = _sample_movie()
    path = tmp_path / "movie.nfo"
    nfo.write_movie_to_file(path, movie)
    assert nfo.parse_movie(path) == movie


def test_wrong_root_element_raises():
    with pytest.raises(ValueError):
        nfo.parse_movie_with_data(b"<show><title>x</title></show>")


def test_malformed_xml_raises():
    with pytest.raises(ValueError):
        nfo.parse_movie_with_data(b"<movie><title>x</movie>")