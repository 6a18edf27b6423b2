"""
Tests for geometry operations

Covers argument parsing, validity rules and the primitive each operation
dispatches to, plus end-to-end checks on real pixels.
"""

import logging

import numpy as np
import pytest
from PIL import Image as PILImage

from imapipe.image import Image
from imapipe.operations import Aspect, Canvas, Crop, Deborder, Flip, Resize
from imapipe.parsing.colours import BLACK, RED, TRANSPARENT, WHITE, Colour
from imapipe.parsing.names import Anchor, Channels, EdgeMode, ResampleFilter


class TestResize:
    """Test Resize parsing and dispatch"""

    def test_width_only_preserves_aspect(self, make_recording):
        """Should compute the missing height from the source aspect"""
        image = make_recording(1600, 1200)
        op = Resize("800,*,bilinear")

        assert op.valid
        assert op.apply(image) is True
        assert image.call("resample") == (800, 600, ResampleFilter.BILINEAR, EdgeMode.CLAMP)

    def test_height_only_preserves_aspect(self, make_recording):
        """Should compute the missing width from the source aspect"""
        image = make_recording(1000, 500)
        Resize("*,100").apply(image)
        assert image.call("resample")[:2] == (200, 100)

    def test_missing_side_truncates(self, make_recording):
        """Should truncate the computed side"""
        image = make_recording(300, 200)
        Resize("100,*").apply(image)
        # 100 * 200 / 300 = 66.67
        assert image.call("resample")[:2] == (100, 66)

    def test_clamps_dimensions(self, make_recording):
        """Should clamp both sides into 4..32768"""
        image = make_recording(100, 100)
        Resize("2,40000").apply(image)
        assert image.call("resample")[:2] == (4, 32768)

    def test_filter_and_edge_mode(self, make_recording):
        """Should read filter and edge mode names"""
        image = make_recording(100, 100)
        Resize("50,50,LANCZOS,wrap").apply(image)
        assert image.call("resample") == (50, 50, ResampleFilter.LANCZOS, EdgeMode.WRAP)

    def test_unknown_filter_defaults(self):
        """Should fall back to bilinear and clamp"""
        op = Resize("50,50,nope,nope")
        assert op.filter is ResampleFilter.BILINEAR
        assert op.edge_mode is EdgeMode.CLAMP

    def test_requires_two_arguments(self, caplog):
        """Should be invalid with fewer than 2 arguments"""
        with caplog.at_level(logging.WARNING):
            op = Resize("800")
        assert not op.valid
        assert "Operation Resize Invalid. At least 2 arguments required." in caplog.text

    def test_requires_a_dimension(self):
        """Should be invalid when neither side is positive"""
        assert not Resize("0,*").valid
        assert not Resize("abc,-4").valid

    def test_same_size_is_noop(self, make_recording, caplog):
        """Should skip and succeed when the size is unchanged"""
        image = make_recording(100, 50)
        with caplog.at_level(logging.INFO):
            assert Resize("100,*").apply(image) is True
        assert image.calls == []
        assert "Resize not applied" in caplog.text

    def test_logs_primitive(self, make_recording, caplog):
        """Should log the resolved primitive call"""
        image = make_recording(1600, 1200)
        with caplog.at_level(logging.INFO):
            Resize("800,*,bilinear").apply(image)
        assert "Resize | Resample[Dim:800x600 Filter:bilinear EdgeMode:clamp]" in caplog.text

    def test_zero_size_source_fails(self, make_recording):
        """Should report failure for an empty image"""
        assert Resize("10,10").apply(make_recording(0, 0)) is False

    def test_idempotent(self, make_gradient):
        """Should give the same pixels when applied twice"""
        once = make_gradient(64, 48)
        twice = make_gradient(64, 48)
        op = Resize("32,*,bicubic")

        op.apply(once)
        op.apply(twice)
        op.apply(twice)

        assert (twice.width, twice.height) == (32, 24)
        assert once.to_pil().tobytes() == twice.to_pil().tobytes()


class TestCanvas:
    """Test Canvas parsing and dispatch"""

    def test_grow_centred_with_black(self, make_solid):
        """Should centre the original and fill new area with black"""
        colour = Colour(200, 100, 50, 255)
        image = make_solid(1280, 720, colour)

        assert Canvas("1920,1080,mm,black").apply(image) is True

        assert (image.width, image.height) == (1920, 1080)
        assert image.get_pixel(0, 0) == BLACK
        assert image.get_pixel(319, 180) == BLACK
        assert image.get_pixel(320, 180) == colour
        assert image.get_pixel(1599, 899) == colour
        assert image.get_pixel(1600, 900) == BLACK

    def test_anchor_dispatch(self, make_recording):
        """Should crop by anchor when no explicit coordinates are given"""
        image = make_recording(100, 100)
        Canvas("50,50,br,white").apply(image)
        assert image.call("crop_anchor") == (50, 50, Anchor.BR, WHITE)

    def test_defaults(self):
        """Should default to middle anchor and black fill"""
        op = Canvas("50,50")
        assert op.anchor is Anchor.MM
        assert op.fill == BLACK
        assert (op.anchor_x, op.anchor_y) == (-1, -1)

    def test_explicit_anchor_coordinates(self, make_recording):
        """Should compute origin as anchor * (src - dst) / src"""
        image = make_recording(100, 100)
        Canvas("50,50,mm,black,10,20").apply(image)
        assert image.call("crop") == (50, 50, 5, 10, BLACK)

    def test_explicit_anchor_truncates_toward_zero(self, make_recording):
        """Should truncate negative origins toward zero"""
        image = make_recording(300, 300)
        Canvas("400,400,mm,black,7,7").apply(image)
        # 7 * -100 / 300 = -2.33
        assert image.call("crop") == (400, 400, -2, -2, BLACK)

    def test_wildcard_anchor_coordinate_ignored(self, make_recording):
        """Should use the anchor when either coordinate is *"""
        image = make_recording(100, 100)
        Canvas("50,50,tl,black,10,*").apply(image)
        assert image.names == ["crop_anchor"]

    def test_same_size_is_noop(self, make_recording):
        """Should not crop when the size is unchanged"""
        image = make_recording(100, 100)
        assert Canvas("100,100").apply(image) is True
        assert image.calls == []

    def test_invalid(self):
        """Should need 2 arguments and a positive side"""
        assert not Canvas("100").valid
        assert not Canvas("*,*").valid


class TestAspect:
    """Test Aspect parsing and dispatch"""

    def test_crop_16_9_square(self, make_recording):
        """Should crop a square to 1000x562"""
        image = make_recording(1000, 1000)
        assert Aspect("16:9,crop,mm").apply(image) is True
        assert image.call("crop_anchor") == (1000, 562, Anchor.MM, BLACK)

    def test_bad_ratio_defaults_16_9(self):
        """Should default unparsable ratio parts to 16 and 9"""
        op = Aspect("abc:def,crop")
        assert (op.num, op.den) == (16, 9)

    def test_partial_ratio_defaults(self):
        """Should default each non-positive part independently"""
        op = Aspect("4:*,crop")
        assert (op.num, op.den) == (4, 9)

    def test_crop_narrow_ratio(self, make_recording):
        """Should shrink the width when the target is narrower"""
        image = make_recording(100, 100)
        Aspect("1:2,crop").apply(image)
        assert image.call("crop_anchor")[:2] == (50, 100)

    def test_letterbox_grows(self, make_recording):
        """Should grow the short side in letterbox mode"""
        image = make_recording(1000, 1000)
        Aspect("16:9,letter,tl,white").apply(image)
        assert image.call("crop_anchor") == (1778, 1000, Anchor.TL, WHITE)

    def test_letterbox_narrow(self, make_recording):
        """Should grow the height for a narrower target"""
        image = make_recording(160, 90)
        Aspect("1:1,letter").apply(image)
        assert image.call("crop_anchor")[:2] == (160, 160)

    def test_matching_aspect_is_noop(self, make_recording):
        """Should skip when the image already has the ratio"""
        image = make_recording(1600, 900)
        assert Aspect("16:9,crop").apply(image) is True
        assert image.calls == []

    def test_explicit_coordinates(self, make_recording):
        """Should use the explicit anchor formula"""
        image = make_recording(200, 100)
        Aspect("1:1,crop,mm,black,100,0").apply(image)
        # 100 * (200 - 100) / 200 = 50
        assert image.call("crop") == (100, 100, 50, 0, BLACK)

    def test_requires_two_arguments(self):
        """Should be invalid with a single argument"""
        assert not Aspect("16:9").valid

    def test_real_crop(self, make_gradient):
        """Should produce the computed size on real pixels"""
        image = make_gradient(100, 100)
        Aspect("2:1,crop").apply(image)
        assert (image.width, image.height) == (100, 50)


class TestDeborder:
    """Test Deborder parsing and dispatch"""

    def test_samples_top_left_when_no_colour(self, make_recording):
        """Should read pixel (0,0) when no test colour is given"""
        image = make_recording(pixel=Colour(1, 2, 3, 4))
        Deborder("").apply(image)
        assert image.call("get_pixel") == (0, 0)
        assert image.call("deborder") == (Colour(1, 2, 3, 4), Channels.RGBA)

    def test_named_colour_and_channels(self, make_recording):
        """Should use a given colour and channel letters"""
        image = make_recording()
        Deborder("#FFFFFFFF,rg").apply(image)
        assert image.call("deborder") == (WHITE, Channels.R | Channels.G)
        assert "get_pixel" not in image.names

    def test_unknown_colour_samples(self, make_recording):
        """Should sample when the colour token is not a colour"""
        image = make_recording(pixel=RED)
        Deborder("*,*").apply(image)
        assert image.call("deborder") == (RED, Channels.RGBA)

    def test_empty_mask_defaults_to_rgba(self):
        """Should treat a mask without letters as RGBA"""
        assert Deborder("white,xyz").channels == Channels.RGBA

    def test_trims_real_border(self):
        """Should remove a uniform frame around the content"""
        pil = PILImage.new("RGBA", (20, 20), (0, 0, 0, 255))
        pil.paste(PILImage.new("RGBA", (16, 12), (255, 255, 255, 255)), (2, 5))
        image = Image.from_pil(pil)

        Deborder("").apply(image)

        assert (image.width, image.height) == (16, 12)
        assert image.get_pixel(0, 0) == WHITE

    def test_channel_mask_limits_comparison(self):
        """Should only compare masked channels"""
        pil = PILImage.new("RGBA", (10, 10), (0, 0, 0, 255))
        pil.paste(PILImage.new("RGBA", (6, 6), (0, 0, 0, 128)), (2, 2))
        image = Image.from_pil(pil)

        Deborder("black,rgb").apply(image)
        assert (image.width, image.height) == (10, 10)

        Deborder("black,a").apply(image)
        assert (image.width, image.height) == (6, 6)


class TestCrop:
    """Test Crop parsing and dispatch"""

    def test_absolute_inclusive_max(self, make_recording):
        """Should treat max coordinates as inclusive"""
        image = make_recording(200, 200)
        Crop("abs,0,0,99,49").apply(image)
        assert image.call("crop") == (100, 50, 0, 0, TRANSPARENT)

    def test_relative(self, make_recording):
        """Should take width and height directly"""
        image = make_recording(200, 200)
        Crop("rel,10,10,20,30,white").apply(image)
        assert image.call("crop") == (20, 30, 10, 10, WHITE)

    def test_unknown_mode_is_absolute(self):
        """Should default to absolute mode"""
        assert Crop("what,0,0,9,9").mode == Crop.ABSOLUTE

    def test_wildcard_sizes(self):
        """Should default unset sizes to the minimum window"""
        assert Crop("rel,0,0,*,*").size == (4, 4)
        assert Crop("abs,0,0,*,*").size == (4, 4)

    def test_negative_origin_invalid(self):
        """Should reject negative origins"""
        assert not Crop("abs,-1,0,10,10").valid

    def test_small_window_invalid(self):
        """Should reject windows under 4 pixels"""
        assert not Crop("abs,10,10,12,20").valid
        assert not Crop("rel,0,0,2,10").valid

    def test_requires_five_arguments(self):
        """Should be invalid with fewer than 5 arguments"""
        assert not Crop("abs,0,0,10").valid

    def test_pads_outside_source(self, make_solid):
        """Should fill the part of the window outside the image"""
        colour = Colour(10, 20, 30, 255)
        image = make_solid(10, 10, colour)

        Crop("rel,5,5,10,10,red").apply(image)

        assert (image.width, image.height) == (10, 10)
        assert image.get_pixel(0, 0) == colour
        assert image.get_pixel(4, 4) == colour
        assert image.get_pixel(5, 5) == RED
        assert image.get_pixel(9, 0) == RED


class TestFlip:
    """Test Flip parsing and dispatch"""

    @pytest.mark.parametrize("token", ["", "h", "H", "horizontal", "Horizontal", "x"])
    def test_horizontal(self, make_recording, token):
        """Should flip horizontally by default"""
        image = make_recording()
        Flip(token).apply(image)
        assert image.call("flip") == (True,)

    @pytest.mark.parametrize("token", ["v", "V", "vertical", "Vertical"])
    def test_vertical(self, make_recording, token):
        """Should flip vertically"""
        image = make_recording()
        Flip(token).apply(image)
        assert image.call("flip") == (False,)

    def test_real_flip(self, make_gradient):
        """Should mirror pixels left to right"""
        image = make_gradient(16, 8)
        right = image.get_pixel(15, 0)
        Flip("h").apply(image)
        assert image.get_pixel(0, 0) == right

        pixels = np.asarray(image.to_pil())
        assert pixels[0, 0, 0] == 255
