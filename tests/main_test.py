from contextlib import redirect_stdout
import io
import os
import tempfile
from unittest import TestCase

import pandas as pd

from pyssgsea import __main__ as main


class MainTest(TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.dirname = self.tmp_dir.name

        self.expr_path = os.path.join(self.dirname, 'expr.tsv')
        self.gmt_path = os.path.join(self.dirname, 'sets.gmt')

        with open(self.expr_path, 'w') as f:
            f.write(
                'gene\ts1\ts2\n'
                'g1\t5\t1\n'
                'g2\t3\t2\n'
                'g3\t1\t3\n'
            )

        with open(self.gmt_path, 'w') as f:
            f.write(
                'up\tna\tg1\tg2\n'
                'absent\tna\tmissing\n'
            )

    def tearDown(self):
        self.tmp_dir.cleanup()

    def _run(self, args):
        out = io.StringIO()

        with redirect_stdout(out):
            status = main.main(args)

        return status, out.getvalue().splitlines()

    def test_print_scores(self):
        status, lines = self._run([
            self.expr_path, self.gmt_path,
            '--no-scale', '--min-hits', '1',
        ])

        self.assertEqual(status, 0)
        self.assertEqual(lines, ['s1\tup=1.5253', 's2\tup=-1.4568'])

    def test_classic(self):
        status, lines = self._run([
            self.expr_path, self.gmt_path,
            '--no-scale', '--classic', '--min-hits', '1',
        ])

        self.assertEqual(status, 0)
        self.assertEqual(lines, ['s1\tup=1.0000', 's2\tup=-1.0000'])

    def test_write_scores(self):
        out_path = os.path.join(self.dirname, 'scores.tsv')
        status, lines = self._run([
            self.expr_path, self.gmt_path,
            '--min-hits', '1', '--out', out_path,
        ])

        self.assertEqual(status, 0)
        self.assertEqual(lines, [])

        written = pd.read_csv(out_path, sep='\t', index_col=0)
        self.assertEqual(list(written.index), ['up'])
        self.assertEqual(list(written.columns), ['s1', 's2'])

    def test_unwritable_out(self):
        status, lines = self._run([
            self.expr_path, self.gmt_path,
            '--min-hits', '1',
            '--out', os.path.join(self.expr_path, 'scores.tsv'),
        ])

        self.assertEqual(status, 1)
        self.assertEqual(lines, [])

    def test_degenerate_fails(self):
        status, lines = self._run([self.expr_path, self.gmt_path])

        self.assertEqual(status, 1)
        self.assertEqual(lines, [])

    def test_missing_file(self):
        status, _ = self._run([
            os.path.join(self.dirname, 'missing.tsv'),
            self.gmt_path,
        ])

        self.assertEqual(status, 1)

    def test_format_scores(self):
        scores = pd.DataFrame(
            [[0.5, -0.25], [1, 2]],
            index=['a', 'b'],
            columns=['x', 'y'],
        )

        self.assertEqual(
            main.format_scores(scores),
            ['x\ta=0.5000\tb=1.0000', 'y\ta=-0.2500\tb=2.0000'],
        )
