from application.maintenance_flow.contracts import (
    MaintenanceFlowConfig,
    MaintenanceFlowDependencies,
    MaintenanceFlowResult,
    RunReport,
)
from application.maintenance_flow.steps import (
    apply_updates,
    build_dry_run_result,
    build_error_result,
    build_no_changes_result,
    build_run_context,
    build_success_result,
    cleanup_workspace,
    commit_feature_changes,
    create_feature_branch,
    detect_changes,
    discard_feature_branch,
    ensure_clean_worktree,
    finalize_result,
    open_pull_request,
    prepare_repository,
    push_feature_branch,
    resolve_feature_branch,
    verify_changes,
)


def _run_pipeline(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
    report: RunReport,
) -> MaintenanceFlowResult:
    context = build_run_context(config, dependencies)

    dependencies.observe_step("prepare_repo", "start")
    prepare_repository(config, dependencies)
    dependencies.observe_step("prepare_repo", "success")

    dependencies.observe_step("detect_changes", "start")
    detection = detect_changes(config, dependencies)
    report.changes_detected = detection.changes_detected
    if not detection.changes_detected:
        dependencies.observe_step("detect_changes", "success", detail="no changes detected")
        dependencies.observe_step("finalize", "success", detail="skipped (no changes detected)")
        return build_no_changes_result("No outdated dependencies, formatting issues or stale docs detected")
    dependencies.observe_step("detect_changes", "success", detail="changes detected")

    dependencies.observe_step("create_branch", "start")
    ensure_clean_worktree(config, dependencies)
    branch = resolve_feature_branch(config, dependencies, context)
    create_feature_branch(config, dependencies, branch)
    report.branch = branch.name
    dependencies.observe_step("create_branch", "success", detail=branch.name)

    dependencies.observe_step("apply_updates", "start")
    apply_updates(config, dependencies, report)
    dependencies.observe_step("apply_updates", "success", detail=f"warnings_count={len(report.warnings)}")

    dependencies.observe_step("verify_changes", "start")
    changed_files = verify_changes(config, dependencies)
    if not changed_files:
        report.changes_detected = False
        dependencies.observe_step("verify_changes", "success", detail="no working tree changes")
        discard_feature_branch(config, dependencies, branch, report)
        report.branch = None
        dependencies.observe_step("finalize", "success", detail="skipped (updates produced no changes)")
        return build_no_changes_result("Updates produced no working tree changes; branch discarded")
    dependencies.observe_step("verify_changes", "success", detail=f"files_count={len(changed_files)}")

    if config.dry_run:
        discard_feature_branch(config, dependencies, branch, report)
        dependencies.observe_step("publish", "success", detail="skipped (dry_run=true)")
        dependencies.observe_step("finalize", "success", detail="dry_run completed")
        return build_dry_run_result(branch, changed_files)

    dependencies.observe_step("commit", "start")
    commit = commit_feature_changes(config, dependencies, context)
    dependencies.observe_step("commit", "success", detail=commit)

    dependencies.observe_step("push", "start")
    push_feature_branch(config, dependencies, branch)
    dependencies.observe_step("push", "success", detail=branch.name)

    dependencies.observe_step("create_pr", "start")
    pull_request = open_pull_request(dependencies, context, branch, report)
    dependencies.observe_step(
        "create_pr",
        "success",
        detail=f"number={pull_request.number}" if pull_request else "number unavailable",
    )

    result = build_success_result(
        branch,
        commit=commit,
        changed_files=changed_files,
        pull_request=pull_request,
    )
    dependencies.observe_step("finalize", "success", detail=result.message)
    return result


def run_maintenance_flow(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
    *,
    raise_on_error: bool = True,
) -> MaintenanceFlowResult:
    report = RunReport()
    try:
        result = _run_pipeline(config, dependencies, report)
    except Exception as error:
        dependencies.observe_step("finalize", "error", detail=str(error))
        if raise_on_error:
            raise
        result = build_error_result(report, error)
    finally:
        cleanup_workspace(config, dependencies, report)
    return finalize_result(result, report)
