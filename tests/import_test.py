from unittest import TestCase


class ImportTest(TestCase):
    def test_imports(self):
        import pyssgsea

        self.assertIs(pyssgsea.ssgsea, pyssgsea.enrichments.ssgsea)
        self.assertTrue(pyssgsea.version.version)
