"""SQL for the users table. All values are bound parameters (%s), never interpolated."""

FIND_ALL = "SELECT id, username, admin FROM users ORDER BY id"

FIND_BY_ID = "SELECT id, username, admin FROM users WHERE id = %s"

FIND_BY_USERNAME = "SELECT id, username, password, salt, admin FROM users WHERE username = %s"

CREATE = "INSERT INTO users (username, password, salt, admin) VALUES (%s, %s, %s, %s)"

CREATE_WITH_ID = "INSERT INTO users (id, username, password, salt, admin) VALUES (%s, %s, %s, %s, %s)"

UPDATE_BY_ID = "UPDATE users SET username = %s, password = %s, salt = %s, admin = %s WHERE id = %s"

DELETE_BY_ID = "DELETE FROM users WHERE id = %s"
