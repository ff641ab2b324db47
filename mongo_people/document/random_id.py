import secrets
import string


def random_id(length=24):
    # Letters and digits only so that ids are safe to paste into a shell
    characters = string.ascii_letters + string.digits
    return ''.join(secrets.choice(characters) for _ in range(length))
