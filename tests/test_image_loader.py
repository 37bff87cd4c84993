from PIL import Image

from picksort.core.image_loader import load_pil_image


class TestLoadPilImage:
    def test_thumbnail_respects_max_size(self, tmp_path):
        path = tmp_path / "big.png"
        Image.new("RGB", (800, 400), "red").save(path)

        img = load_pil_image(path, max_size=200)

        assert img is not None
        assert max(img.size) == 200
        assert img.size == (200, 100)

    def test_small_image_not_upscaled(self, tmp_path):
        path = tmp_path / "small.gif"
        Image.new("P", (30, 20)).save(path)
        img = load_pil_image(path, max_size=200)
        assert img.size == (30, 20)

    def test_full_size_without_limit(self, tmp_path):
        path = tmp_path / "photo.jpg"
        Image.new("RGB", (640, 480), "blue").save(path)
        assert load_pil_image(path).size == (640, 480)

    def test_corrupt_file_returns_none(self, tmp_path):
        path = tmp_path / "broken.jpg"
        path.write_bytes(b"not an image at all")
        assert load_pil_image(path) is None

    def test_svg_is_left_to_the_gui(self, tmp_path):
        path = tmp_path / "icon.svg"
        path.write_text('<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"/>', encoding="utf-8")
        assert load_pil_image(path) is None
