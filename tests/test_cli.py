from gestormaterias.models import Curso, Usuario

from .base import AppTestCase


class CliTestCase(AppTestCase):
    def test_create_usuario(self):
        runner = self.app.test_cli_runner()
        result = runner.invoke(
            args=["create-usuario", "--nombre", "Admin", "--email", "Admin@Escuela.test", "--password", "x", "--role", "admin"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(Usuario.query.filter_by(email="admin@escuela.test").one().role, "admin")

        again = runner.invoke(args=["create-usuario", "--nombre", "Admin", "--email", "admin@escuela.test", "--password", "x"])
        self.assertNotEqual(again.exit_code, 0)
        self.assertIn("Ya existe", again.output)

    def test_create_curso(self):
        result = self.app.test_cli_runner().invoke(
            args=["create-curso", "--nombre", "3ro C", "--nivel", "Secundario", "--anio", "2026"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(Curso.query.one().display_name, "3ro C - Secundario (2026)")
