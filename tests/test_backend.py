import unittest
import numpy.testing as npt
import numpy as np

from holotools.errors import ConfigError
from holotools.utils import backend as backend_module
from holotools.utils import Backend, gather, is_device_array
from holotools.tools import lenses_and_prisms, finalize


class TestBackend(unittest.TestCase):
    def test_parse(self):
        self.assertIsNone(Backend.parse(None))
        self.assertIs(Backend.parse('host'), Backend.HOST)
        self.assertIs(Backend.parse('CPU'), Backend.HOST)
        self.assertIs(Backend.parse('gpu'), Backend.DEVICE)
        self.assertIs(Backend.parse(Backend.DEVICE), Backend.DEVICE)
        with self.assertRaises(ConfigError):
            Backend.parse('tpu')
        with self.assertRaises(ConfigError):
            Backend.parse(1)

    def test_infer_host(self):
        self.assertIs(Backend.infer(np.zeros(3), None), Backend.HOST)
        self.assertIs(Backend.infer(), Backend.HOST)
        self.assertIs(Backend.infer(np.zeros(3), backend='host'), Backend.HOST)
        self.assertIs(Backend.HOST.xp, np)

    def test_host_arrays(self):
        arr = np.arange(3)
        self.assertFalse(is_device_array(arr))
        self.assertIs(gather(arr), arr)
        self.assertIs(Backend.HOST.asarray(arr), arr)
        npt.assert_array_equal(Backend.HOST.asarray([1, 2]), [1, 2])
        self.assertIsNone(Backend.HOST.asarray(None))

    @unittest.skipUnless(backend_module.cp is None, 'cupy is installed')
    def test_device_unavailable(self):
        with self.assertRaises(ConfigError):
            Backend.infer(backend='device')
        with self.assertRaises(ConfigError):
            Backend.DEVICE.xp
        with self.assertRaises(ConfigError):
            lenses_and_prisms((4, 4), [0.1, 0.0, 0.0], backend='device')

    @unittest.skipIf(backend_module.cp is None, 'cupy is not installed')
    def test_device(self):
        cp = backend_module.cp
        xyz = [[0.1, -0.2], [0.05, 0.0], [0.0, 0.001]]
        host = lenses_and_prisms((16, 16), xyz)
        device = lenses_and_prisms((16, 16), xyz, backend='device', gather=False)
        self.assertTrue(is_device_array(device))
        npt.assert_array_almost_equal(gather(device), host)

        lens = cp.asarray(np.zeros((16, 16)))
        self.assertTrue(isinstance(lenses_and_prisms((16, 16), xyz, lens=lens), np.ndarray))

        pattern = cp.asarray(host)
        npt.assert_array_almost_equal(finalize(pattern, device='dmd'), finalize(host, device='dmd'))


if __name__ == '__main__':
    unittest.main()
