"""
Tests for the refraction-corrupted r-u-v measurement model.
"""

import pytest
import numpy as np

from ..geometry import GaussianEstimate, MeasurementGeometry
from ..measurement import StdRefracRuvModel, cart_to_ruv_std_refrac
from ...environment import AtmosphericModel
from ...validators import DegenerateGeometryError, ParameterOutOfRangeError, ShapeMismatchError


class TestMeasurementGeometry:
    """Test geometry defaults and validation."""

    def test_defaults(self):
        """Monostatic sensor at the origin with an identity rotation."""
        geo = MeasurementGeometry()

        np.testing.assert_array_equal(geo.transmitter, np.zeros(3))
        np.testing.assert_array_equal(geo.receiver, np.zeros(3))
        np.testing.assert_array_equal(geo.rotation, np.eye(3))
        assert geo.use_half_range is False
        assert geo.is_monostatic
        assert geo.frame_origin == (0.0, 0.0)
        assert geo.atmosphere.surface_refractivity == 313.0

    def test_arrays_are_read_only(self):
        """Geometry can be shared between threads safely."""
        receiver = np.array([1.0, 2.0, 3.0])
        geo = MeasurementGeometry(receiver=receiver)

        receiver[0] = 100.0
        assert geo.receiver[0] == 1.0
        with pytest.raises(ValueError):
            geo.receiver[0] = 5.0

    def test_bistatic(self, bistatic_geometry):
        assert not bistatic_geometry.is_monostatic

    def test_rejects_reflection(self):
        """Rotation must have determinant +1."""
        with pytest.raises(ParameterOutOfRangeError):
            MeasurementGeometry(rotation=np.diag([1.0, 1.0, -1.0]))

    def test_rejects_non_orthonormal(self):
        with pytest.raises(ParameterOutOfRangeError):
            MeasurementGeometry(rotation=2 * np.eye(3))

    def test_rejects_bad_position(self):
        with pytest.raises(ShapeMismatchError):
            MeasurementGeometry(transmitter=[1.0, 2.0])


class TestGaussianEstimate:

    def test_std(self):
        est = GaussianEstimate(np.zeros(3), np.diag([4.0, 9.0, 0.25]))
        np.testing.assert_allclose(est.std, [2.0, 3.0, 0.5])

    def test_shape_check(self):
        with pytest.raises(ShapeMismatchError):
            GaussianEstimate(np.zeros(3), np.eye(2))


class TestStdRefracRuvModel:
    """Test the measurement function."""

    def test_boresight_point(self, boresight_mean):
        """Target 1 km out along x from a monostatic sensor on the ground."""
        ruv = cart_to_ruv_std_refrac(boresight_mean)

        assert ruv.shape == (3, 1)
        # Two 1 km legs near the surface, each lengthened by about Ns * 1e-6 * 1 km
        assert ruv[0, 0] == pytest.approx(2000.0 + 2 * 313e-6 * 1000.0, abs=1e-3)
        assert ruv[1, 0] == pytest.approx(1.0)
        assert ruv[2, 0] == pytest.approx(0.0)

    def test_refraction_lengthens_range(self, bistatic_geometry, random_seed):
        """Excess path is strictly positive."""
        model = StdRefracRuvModel(bistatic_geometry)
        points = np.random.randn(3, 20) * 5000.0 + np.array([[0.0], [0.0], [3000.0]])

        assert np.all(model.refracted_range(points) > model.geometric_range(points))

    def test_range_increases_with_refractivity(self, boresight_mean):
        """A denser atmosphere gives a longer electrical path."""
        low = cart_to_ruv_std_refrac(
            boresight_mean, MeasurementGeometry(atmosphere=AtmosphericModel(surface_refractivity=250.0))
        )
        high = cart_to_ruv_std_refrac(
            boresight_mean, MeasurementGeometry(atmosphere=AtmosphericModel(surface_refractivity=400.0))
        )

        assert high[0, 0] > low[0, 0]

    def test_direction_cosines_ignore_atmosphere(self, rotation_matrix, random_seed):
        """u and v are identical for any refractivity model."""
        points = np.random.randn(3, 15) * 1e4
        results = [
            cart_to_ruv_std_refrac(points, MeasurementGeometry(
                rotation=rotation_matrix,
                atmosphere=AtmosphericModel(surface_refractivity=ns, decay_constant=ce)
            ))
            for ns, ce in ((200.0, None), (313.0, None), (450.0, 5e-5))
        ]

        for other in results[1:]:
            np.testing.assert_array_equal(other[1:], results[0][1:])
            assert np.all(other[0] != results[0][0])

    def test_rotation_to_local_frame(self):
        """u and v are taken in the rotated receiver frame."""
        M = np.array([[0.0, 1.0, 0.0],
                      [-1.0, 0.0, 0.0],
                      [0.0, 0.0, 1.0]])
        model = StdRefracRuvModel(MeasurementGeometry(rotation=M))
        uv = model.direction_cosines(np.array([1000.0, 0.0, 0.0]))

        np.testing.assert_allclose(uv[:, 0], [0.0, -1.0], atol=1e-15)

    def test_direction_cosines_inside_unit_disk(self, bistatic_geometry, random_seed):
        model = StdRefracRuvModel(bistatic_geometry)
        uv = model.direction_cosines(np.random.randn(3, 50) * 1e4)

        assert np.all(np.sum(uv**2, axis=0) <= 1.0 + 1e-12)

    def test_bistatic_geometric_range(self):
        """Sum of transmitter and receiver legs."""
        geo = MeasurementGeometry(transmitter=[-2000.0, 0.0, 0.0])
        model = StdRefracRuvModel(geo)

        assert model.geometric_range(np.array([1000.0, 0.0, 0.0]))[0] == pytest.approx(4000.0)

    def test_half_range(self, bistatic_geometry, random_seed):
        """use_half_range halves the complete refracted range."""
        points = np.random.randn(3, 10) * 2000.0
        half_geo = MeasurementGeometry(
            transmitter=bistatic_geometry.transmitter,
            receiver=bistatic_geometry.receiver,
            rotation=bistatic_geometry.rotation,
            use_half_range=True,
            atmosphere=bistatic_geometry.atmosphere
        )

        full = cart_to_ruv_std_refrac(points, bistatic_geometry)
        half = cart_to_ruv_std_refrac(points, half_geo)

        np.testing.assert_allclose(half[0], full[0] / 2, rtol=1e-14)
        np.testing.assert_array_equal(half[1:], full[1:])

    def test_ecef_frame(self):
        """With no frame origin the points are ECEF."""
        a = AtmosphericModel().semi_major_axis
        rx = np.array([a, 0.0, 0.0])
        geo = MeasurementGeometry(transmitter=rx, receiver=rx, frame_origin=None)
        target = np.array([[a + 100.0], [0.0], [0.0]])

        ruv = cart_to_ruv_std_refrac(target, geo)
        assert ruv[0, 0] == pytest.approx(200.0 + 2 * 313e-6 * 100.0, abs=1e-3)
        assert ruv[1, 0] == pytest.approx(1.0)

    def test_point_at_receiver(self):
        """Direction cosines are undefined at the receiver."""
        model = StdRefracRuvModel(MeasurementGeometry(receiver=[10.0, 20.0, 30.0]))

        with pytest.raises(DegenerateGeometryError):
            model.convert(np.array([[10.0, 500.0], [20.0, 0.0], [30.0, 0.0]]))

    def test_callable(self, boresight_mean):
        model = StdRefracRuvModel()
        np.testing.assert_array_equal(model(boresight_mean), model.convert(boresight_mean))

    def test_bad_point_shape(self):
        with pytest.raises(ShapeMismatchError):
            cart_to_ruv_std_refrac(np.zeros((2, 4)))
