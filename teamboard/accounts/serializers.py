def user_to_dict(user):
    return {
        "id": user.pk,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "role_label": user.get_role_display(),
        "avatar_url": user.avatar_url,
    }
