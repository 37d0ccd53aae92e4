ROLE_ADMIN = "admin"
ROLE_PROFESOR = "profesor"
ROLES = (ROLE_ADMIN, ROLE_PROFESOR)

DEFAULT_BUCKET = "class-materials"
# 1 year
DEFAULT_SIGNED_URL_TTL = 31536000

# Defaults required by the profesor table's not-null columns
PROFESOR_DEFAULT_GENERO = "Otro"
PROFESOR_DEFAULT_DIRECCION = "Sin especificar"
PROFESOR_DEFAULT_TELEFONO = 0
