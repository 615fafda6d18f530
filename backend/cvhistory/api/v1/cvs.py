# cvhistory/api/v1/cvs.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from cvhistory.application.cv import (
    compare_versions,
    create_branch,
    create_version,
    get_branches,
    get_storage_usage,
    get_version,
    get_versions,
    restore_version,
)
from cvhistory.application.cv.access import load_owned_state
from cvhistory.domain.exceptions import ValidationError
from cvhistory.normalizers.cv_version import normalize_comparison, normalize_version
from cvhistory.normalizers.pagination import normalize_pagination
from cvhistory.storage.document_store import SqlDocumentStore
from cvhistory.utils.optimistic_lock import enforce_optimistic_lock
from . import v1_bp

# Recorded by restore and branch operations only
SYSTEM_CHANGE_TYPES = {"restore", "branch"}


# ------------------------
# Versions
# ------------------------

@v1_bp.route("/cvs/<cv_id>/versions", methods=["GET"])
@jwt_required()
def list_versions(cv_id):
    page_num = request.args.get("page", 1, type=int)
    per_page = request.args.get("limit", 20, type=int)

    result = get_versions(
        document_id=cv_id,
        user_id=get_jwt_identity(),
        page=page_num,
        limit=per_page,
    )

    return jsonify(
        normalize_pagination(
            result["versions"],
            lambda v: normalize_version(v, include_html=False),
            page=page_num,
            per_page=per_page,
            total=result["total"],
        )
    )


@v1_bp.route("/cvs/<cv_id>/versions/<int:version>", methods=["GET"])
@jwt_required()
def show_version(cv_id, version):
    found = get_version(
        document_id=cv_id,
        version_number=version,
        user_id=get_jwt_identity(),
    )
    return jsonify(normalize_version(found))


@v1_bp.route("/cvs/<cv_id>/versions/snapshot", methods=["POST"])
@jwt_required()
def create_snapshot(cv_id):
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    change_type = data.get("change_type", "manual")
    if isinstance(change_type, str) and change_type in SYSTEM_CHANGE_TYPES:
        raise ValidationError(f"Change type '{change_type}' cannot be requested directly")

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    state = load_owned_state(SqlDocumentStore(), cv_id, user_id)
    enforce_optimistic_lock(state["updated_at"])

    version = create_version(
        document_id=cv_id,
        owner_id=user_id,
        change_type=change_type,
        change_description=data.get("description"),
        label=data.get("label"),
    )
    return jsonify(normalize_version(version)), 201


@v1_bp.route("/cvs/<cv_id>/versions/<int:version>/restore", methods=["POST"])
@jwt_required()
def restore(cv_id, version):
    restored = restore_version(
        document_id=cv_id,
        version_number=version,
        owner_id=get_jwt_identity(),
    )
    return jsonify(restored), 200


@v1_bp.route("/cvs/<cv_id>/versions/compare", methods=["GET"])
@jwt_required()
def compare(cv_id):
    version_a = request.args.get("a", type=int)
    version_b = request.args.get("b", type=int)
    if version_a is None or version_b is None:
        raise ValidationError("Query parameters 'a' and 'b' must be version numbers")

    result = compare_versions(
        document_id=cv_id,
        version_a=version_a,
        version_b=version_b,
        user_id=get_jwt_identity(),
    )
    return jsonify(normalize_comparison(result))


# ------------------------
# Branches
# ------------------------

@v1_bp.route("/cvs/<cv_id>/branches", methods=["POST"])
@jwt_required()
def create_cv_branch(cv_id):
    data = request.get_json(silent=True) or {}

    branch = create_branch(
        document_id=cv_id,
        owner_id=get_jwt_identity(),
        branch_name=data.get("name"),
        from_version_number=data.get("from_version"),
    )
    return jsonify(normalize_version(branch)), 201


@v1_bp.route("/cvs/<cv_id>/branches", methods=["GET"])
@jwt_required()
def list_branches(cv_id):
    branches = get_branches(document_id=cv_id, user_id=get_jwt_identity())
    return jsonify([normalize_version(b, include_html=False) for b in branches])


# ------------------------
# Storage
# ------------------------

@v1_bp.route("/storage/usage", methods=["GET"])
@jwt_required()
def storage_usage():
    return jsonify(get_storage_usage(user_id=get_jwt_identity()))
