# yamdc

A library for organising a local movie collection: work out a movie's number
from its file name, hold its metadata, crop posters from covers, stamp tag
watermarks on posters, run metadata handlers, and read and write
Jellyfin/Kodi style `.nfo` files.

## Modules

- `yamdc.number_parser` turns a file name into a `Number`: the movie number,
  episode, and the flags for Chinese subtitles, uncensored, 4K and leaked.
  `parse` and `parse_with_file_name` take optional `[pattern, replacement]`
  rules that are applied to the name first (replacements may use `$1`,
  `${name}`, `$&` and `$$`). It also has `is_uncensor_movie`,
  `rewrite_number` (FC2 and leading-digit rewrites), `get_clean_id` and
  `reorganize_all_numbers`.
- `yamdc.model` holds the data types `Number`, `AvMeta`, `File`,
  `FileContext` and `Category`, plus `is_fc2`, `determine_category` and
  `decode_fc2_val_id`. `Number.generate_file_name()` appends `-4K`, `-C` and
  `-LEAK` suffixes; `Number.generate_tags()` returns the matching tags.
- `yamdc.nfo` reads and writes `.nfo` XML documents (`Movie`, `Actor`, `Art`,
  `ScrapeInfo`) with `parse_movie`, `parse_movie_with_data`, `write_movie` and
  `write_movie_to_file`.
- `yamdc.config` loads a JSON configuration that may contain `//` and `/* */`
  comments and trailing commas (`parse`, `standardize`, `Config.from_dict`),
  filling unset fields from `default_config()`. Bad files raise `ConfigError`.
- `yamdc.envflag` reads feature switches from the environment.
- `yamdc.hasher` gives hex MD5 and SHA-1 digests of strings and bytes.
- `yamdc.client` provides `HTTPClient` (cookies, timeout, optional proxy),
  a shared default client, and `decode_body`/`read_http_data` for gzip,
  deflate and zstd bodies.
- `yamdc.download` has `DownloadManager.download(src, dst)`, which writes
  through a `.temp` file, and `resolve(client, deps)`, which downloads each
  `Dependency` whose `<target>.ts` marker file is missing and then writes
  the marker.
- `yamdc.ffmpeg` calls `ffmpeg` (JPEG yuv420p conversion) and `ffprobe`
  (media duration) when they are on `PATH`; `is_ffmpeg_enabled()` and
  `is_ffprobe_enabled()` report whether they were found.
- `yamdc.face` defines the `FaceRecognizer` interface, `FaceGroup` (first
  recogniser that succeeds wins), `Rect`, `find_max_face` and the shared
  recogniser set with `set_face_rec`.
- `yamdc.imaging` decodes images, encodes JPEG, scales, and crops 7:10
  posters: `cut_censored_image_from_bytes` cuts from the right hand side,
  `cut_image_with_face_rec_from_bytes` centres on the largest face found by
  the shared recogniser.
- `yamdc.watermark` stacks up to four tag watermarks in the bottom right
  corner of a poster. Watermark images are supplied with `register_resource`.
- `yamdc.processor` has `DefaultProcessor`, `HandlerProcessor` and
  `ProcessorGroup` (runs every processor, logs failures, raises the last).
- `yamdc.handlers` is a registry of named handlers. Registered by default:
  `actor_spliter`, `duration_fixer`, `number_title` and `tag_padder`.

## Examples

Parse a file name:

```python
from yamdc.number_parser import parse_with_file_name

number = parse_with_file_name("abc-123-C.mp4")
print(number.number_id, number.is_cn_sub)
print(number.generate_file_name())
```

Write an NFO file:

```python
from yamdc.nfo import Actor, Movie, write_movie_to_file

movie = Movie(title="ABC-123 Example", id="ABC-123", actors=[Actor(name="Someone")])
write_movie_to_file("ABC-123.nfo", movie)
```

Crop a poster from a cover image:

```python
from yamdc.imaging import cut_censored_image_from_bytes

with open("cover.jpg", "rb") as fh:
    poster = cut_censored_image_from_bytes(fh.read())
with open("poster.jpg", "wb") as fh:
    fh.write(poster)
```

Stamp watermarks:

```python
from yamdc.watermark import Watermark, add_watermark_from_bytes, register_resource

with open("subtitle.png", "rb") as fh:
    register_resource(Watermark.CHINESE_SUBTITLE, fh.read())
with open("poster.jpg", "rb") as fh:
    marked = add_watermark_from_bytes(fh.read(), [Watermark.CHINESE_SUBTITLE])
```

Run metadata handlers over a file context:

```python
from yamdc.handlers import create_handler, handlers
from yamdc.model import AvMeta, FileContext
from yamdc.number_parser import parse
from yamdc.processor import HandlerProcessor, ProcessorGroup

print(handlers())
fc = FileContext(
    full_file_path="/movies/abc-123.mp4",
    number=parse("abc-123"),
    meta=AvMeta(title="Example", actors=["Name (Alias)"]),
)
group = ProcessorGroup([
    HandlerProcessor(name, create_handler(name, None))
    for name in ("actor_spliter", "tag_padder", "number_title")
])
group.process(fc)
print(fc.meta.title, fc.meta.actors, fc.meta.genres)
```

## Environment switches

`yamdc.envflag.load()` reads these variables (the unprefixed name, such as
`ENABLE_LINK_MODE`, is used when the prefixed one is absent). Values are
`1/t/true` or `0/f/false` in any of their usual cases. Until `load()` is
called every switch reads as off.

| Variable | Default after `load()` |
| --- | --- |
| `YAMDC_ENABLE_SEARCH_META_CACHE` | true |
| `YAMDC_ENABLE_LINK_MODE` | false |
| `YAMDC_ENABLE_GO_FACE_RECOGNIZER` | true |
| `YAMDC_ENABLE_PIGO_FACE_RECOGNIZER` | true |

## What the package does not do

- There is no command line program; everything is used from Python.
- It does not search any site for metadata: the plugin names in
  `default_config()` are only configuration, and no searchers are included.
- Only the four handlers listed above are registered. The other handler names
  in `default_config()` (`image_transcoder`, `poster_cropper`,
  `watermark_maker`, `translater`) have no implementation here, and there is
  no translator or data cache.
- No face recogniser is included; `yamdc.face` only defines the interface,
  and face-centred cropping needs one installed with `set_face_rec`.
- No watermark images are bundled; register them with `register_resource`.

## Requirements

Python 3.10 or later, with pillow, regex, requests and zstandard. `ffmpeg`
and `ffprobe` are optional.